"""
dirsave - run named directory backup jobs.

A backup job copies a source directory tree into a destination directory,
either completely or differentially (only files that are new or whose size
changed). Runs report live progress to a JSON state file and write an
auditable daily event log in JSON or XML.
"""

__version__ = "0.1.0"
__author__ = "dirsave Contributors"
