#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import os
import os.path
import subprocess


# Looked up on every call so that the web app and tests can point it elsewhere
def ledger_dir() -> str:
    return os.environ.get('INVOICE_LEDGER_DIR', os.curdir)


def get_version() -> str:
    try:
        version = subprocess.check_output([
            'git',
                '-C', os.path.dirname(os.path.abspath(__file__)),
            'show',
                '-s',
                '--date=format:%Y-%m-%d',
                '--format=%h (%cd)',
                'HEAD',
        ], text=True, stderr=subprocess.DEVNULL)
    except (FileNotFoundError, subprocess.CalledProcessError):
        version = 'unknown'
    else:
        version = version.rstrip()
    return version
