"""
Scripted stand-in for the zed binary.

Prints its arguments as a JSON list and exits 0, unless FAKE_ZED_MODE
selects another behavior:

    fail   - "boom" on stderr, exit code 3
    sleep  - sleep far longer than any test timeout
    flood  - 200000 bytes on stdout
"""
import json
import os
import sys
import time


def main():
    mode = os.environ.get("FAKE_ZED_MODE", "echo")
    if mode == "fail":
        sys.stderr.write("boom")
        return 3
    if mode == "sleep":
        time.sleep(60)
        return 0
    if mode == "flood":
        sys.stdout.write("x" * 200000)
        return 0
    sys.stdout.write(json.dumps(sys.argv[1:]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
