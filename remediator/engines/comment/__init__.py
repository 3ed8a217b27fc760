"""Comment engine — render remediation results for pull requests."""

from remediator.engines.comment.template import render_remediation_comment

__all__ = ["render_remediation_comment"]
