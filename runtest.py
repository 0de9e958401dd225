#!.venv/bin/python

# The shebang may point towards a venv, but CI executes python -m runtest

import logging
import os
import sys
import time
import traceback
import unittest


RULE = "━" * 70


def println(s: str = "") -> None:
    if s:
        sys.stdout.write(s)
    sys.stdout.write("\n")
    sys.stdout.flush()


def h1(text: str) -> str:
    return f"\n━━━ {text} {RULE[:70 - len(text) - 5]}"


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG if "-v" in sys.argv else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    println(h1("1. Setup"))
    println(f"Python       {sys.version.split()[0]} ({sys.executable})")
    println(f"Prefix       {sys.prefix}")
    println(f"Directory    {os.getcwd()}")
    println(f"Encoding     {sys.stdout.encoding}")

    println(h1("2. Unit Testing"))
    try:
        suite = unittest.defaultTestLoader.discover("test", top_level_dir=".")
        start = time.perf_counter()
        result = unittest.TextTestRunner(stream=sys.stdout, verbosity=2).run(suite)
        println(f"Tests took {time.perf_counter() - start:.1f}s")
        sys.exit(not result.wasSuccessful())
    except Exception as x:
        println("".join(traceback.format_exception(x)))
        sys.exit(1)
