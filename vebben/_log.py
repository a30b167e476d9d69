import sys, datetime

from . import config

def log(*args):
    """Print only when VEBBEN_DEBUG=1 is set"""
    if not config.DEBUG:
        return
    ts = datetime.datetime.now().strftime("%H:%M:%S")
    print(f"[vebben {ts}]", *args, file=sys.stderr, flush=True)
