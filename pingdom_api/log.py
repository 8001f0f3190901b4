#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import logging
import pathlib

logger = logging.getLogger("pingdom-api")


class _VerbosityHandler(logging.StreamHandler):
    """stderr output of setup_logging"""


def setup_logging(verbosity: int) -> None:
    """Log to stderr, the more -v the more"""
    if verbosity >= 3:
        lvl = logging.DEBUG
    elif verbosity == 2:
        lvl = logging.INFO
    elif verbosity == 1:
        lvl = logging.WARN
    else:
        lvl = logging.CRITICAL
    for handler in [h for h in logger.handlers if isinstance(h, _VerbosityHandler)]:
        logger.removeHandler(handler)
    # the level is set on the handler: a log file may still want everything
    handler = _VerbosityHandler()
    handler.setLevel(lvl)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(lvl)


def configure_logger(path: pathlib.Path) -> None:
    handler = logging.FileHandler(path, encoding="UTF-8")
    formatter = logging.Formatter("%(asctime)s [%(levelno)s] [%(name)s %(process)d] %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
