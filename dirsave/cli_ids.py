"""Parsing of job-id selections given on the command line.

Accepted forms::

    3        a single job
    1;3;5    a list of jobs
    1-5      an inclusive range of jobs
"""

from typing import List, Optional, Sequence


class JobIdSyntaxError(ValueError):
    """The job-id argument is not in one of the accepted forms."""
    pass


def _parse_id(text: str, argument: str) -> int:
    text = text.strip()
    if not (text.isascii() and text.isdigit()):
        raise JobIdSyntaxError(f"Invalid job id {text!r} in {argument!r}")
    return int(text)


def parse_job_ids(argument: Optional[str]) -> List[int]:
    """Parse a job selection into a list of ids, in the order given."""
    if argument is None or not argument.strip():
        raise JobIdSyntaxError("A job id, list (1;3;5) or range (1-5) is required")

    argument = argument.strip()

    if ";" in argument:
        return [_parse_id(part, argument) for part in argument.split(";")]

    if "-" in argument:
        parts = argument.split("-")
        if len(parts) != 2:
            raise JobIdSyntaxError(f"Invalid range {argument!r}, expected START-END")
        start, end = (_parse_id(part, argument) for part in parts)
        if start > end:
            raise JobIdSyntaxError(f"Invalid range {argument!r}, start is greater than end")
        return list(range(start, end + 1))

    return [_parse_id(argument, argument)]


def parse_arguments(args: Optional[Sequence[str]]) -> List[int]:
    """Parse the job selection from the first element of an argument list."""
    if not args:
        raise JobIdSyntaxError("No arguments given")
    return parse_job_ids(args[0])
