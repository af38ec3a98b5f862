"""
Show-index command implementation.

Prints the fields of an action (index) record file.
"""

import logging

from buildcachekit.cache.index import read_index_record
from buildcachekit.cache.keys import OUTPUT_SUFFIX, file_name
from buildcachekit.cli.utils import print_error
from buildcachekit.core.exceptions import NoOutputIDError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the show-index command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if the record has no output ID)
    """
    with open(args.file, "rb") as fh:
        try:
            record = read_index_record(fh)
        except NoOutputIDError as e:
            print_error(f"Cannot decode {args.file}", str(e))
            return 1

    print(f"action:    {record.action_id.hex()}")
    print(f"output:    {record.output_id.hex()}")
    print(f"blob:      {file_name(record.output_id, OUTPUT_SUFFIX)}")
    if record.size is not None:
        print(f"size:      {record.size}")
    if record.timestamp is not None:
        print(f"timestamp: {record.timestamp}")
    return 0
