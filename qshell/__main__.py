#!/usr/bin/env python3
"""
qshell - Console support library for query shells
Entry point script

Run the command line tool:
    python -m qshell history
    python -m qshell manifest datastore ./cassandra.xml

Or use as a library:
    from qshell import render_result
    print(render_result(result))
"""

import sys

from qshell.core.console import main

if __name__ == '__main__':
    sys.exit(main())
