"""octopus/__main__.py"""
from octopus.cli import main

main()
