"""pr-remediator — pull-request dependency remediation via a policy engine."""

__version__ = "0.1.0"
