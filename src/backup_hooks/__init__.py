"""backup-hooks: post-backup storage checks, unmounting and notifications."""

__version__ = "0.1.0"
