# tsumesight/common - stable shared configuration helpers
#
# Nothing in this package depends on tsumesight.core.
