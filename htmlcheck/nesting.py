"""
MUST HAVE REQUIREMENTS:
- Push start tags; self-closed tags are opened and closed at once and never pushed.
- Pop on a matching end tag; otherwise search top-down for the innermost match.
- When a match sits deeper, discard every tag above it and report each discarded
  tag that is not self-closing as never closed.
- Report an end tag with no open match as closed before opened and leave the stack alone.
- At end of input report every open tag that is not self-closing, bottom to top.
"""
# ----------------------------------
# Open tag stack
# ----------------------------------
from .errors import Reason


class NestingMatcher:
    def __init__(self, is_self_closing):
        self.is_self_closing = is_self_closing
        self.stack = []

    def open(self, name):
        self.stack.append(name)

    def close(self, name):
        """Returns a list of (reason, tag name) pairs, empty on a clean match."""
        if self.stack and self.stack[-1] == name:
            self.stack.pop()
            return []
        index = self.find(name)
        if index < 0:
            return [(Reason.CLOSED_BEFORE_OPENED, name)]
        skipped = self.stack[index + 1 :]
        del self.stack[index:]
        return [
            (Reason.NOT_PROPERLY_CLOSED, tag)
            for tag in reversed(skipped)
            if not self.is_self_closing(tag)
        ]

    def find(self, name):
        for i in range(len(self.stack) - 1, -1, -1):
            if self.stack[i] == name:
                return i
        return -1

    def finish(self):
        left = [(Reason.NOT_PROPERLY_CLOSED, tag) for tag in self.stack if not self.is_self_closing(tag)]
        self.stack = []
        return left
