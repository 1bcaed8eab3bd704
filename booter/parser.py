"""Command line arguments parser."""

import argparse
import logging

log_values = [i.lower() for i in logging._nameToLevel.keys()]

parser = argparse.ArgumentParser(
    description="Resolve the boot parameters of a compute node nic and write its "
    "boot-time network configuration."
)
parser.add_argument("mac", help="MAC address of the nic the compute node boots from")
parser.add_argument(
    "-l",
    "--loglevel",
    default="warning",
    choices=log_values,
    help=f"Provide logging level. Valid values: {log_values}. \
        Example --loglevel debug, default=warning",
)
