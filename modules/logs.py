# ------------------------------------------------------------------------------
# Copyright 2018 Frank V. Castellucci and Arthur Greef
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ------------------------------------------------------------------------------


import logging

from colorlog import ColoredFormatter

# Console level by -v count, anything past the end is DEBUG
CONSOLE_LEVELS = (logging.WARN, logging.INFO, logging.DEBUG)

# rpc transport libraries, only wanted at full verbosity
TRANSPORT_LOGGERS = ('httpx', 'httpcore', 'hpack')

CONSOLE_FORMAT = (
    "%(log_color)s[%(asctime)s %(levelname)-8s%(module)s "
    "%(threadName)s]%(reset)s %(white)s%(message)s")


def console_level(verbose_level):
    return CONSOLE_LEVELS[
        min(max(verbose_level or 0, 0), len(CONSOLE_LEVELS) - 1)]


def create_console_handler(verbose_level):
    clog = logging.StreamHandler()
    clog.setFormatter(ColoredFormatter(
        CONSOLE_FORMAT,
        datefmt="%H:%M:%S",
        reset=True,
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red',
        }))
    clog.setLevel(console_level(verbose_level))
    return clog


def setup_loggers(verbose_level):
    """Console logging for the rest server and the cli

    verbose_level comes from -v counts or the 'verbose' configuration
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    logger.addHandler(create_console_handler(verbose_level))
    transport_level = (
        logging.DEBUG if console_level(verbose_level) == logging.DEBUG
        else logging.WARN)
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
