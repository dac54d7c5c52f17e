#
#    This file is part of ITERARRAY, iterative arrays of communicating
#    processes in Python.
#
#    ITERARRAY is free software: you can redistribute it and/or modify
#    it under the terms of the GNU Lesser General Public License as
#    published by the Free Software Foundation, either version 3 of
#    the License, or (at your option) any later version.
#
#    ITERARRAY is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#    GNU Lesser General Public License for more details.
#
#    You should have received a copy of the GNU Lesser General Public
#    License along with ITERARRAY. If not, see <http://www.gnu.org/licenses/>.
#
import os
import logging
from logging.config import dictConfig

import iterarray


class OutOfRange(ValueError):
    """A request the chain cannot serve without deadlocking."""
    pass


loggingConfig = {}
handlersConfig = {}

def initLogging(verbosity=0, name="ITERARRAY", filename=None):
        """Creates a logger."""
        global loggingConfig
        global handlersConfig

        verbose_levels = {
            -2: "CRITICAL",
            -1: "ERROR",
            0: "WARNING",
            1: "INFO",
            2: "DEBUG",
            3: "NOTSET",
        }
        verbosity = max(-2, min(verbosity, 3))
        handler = "{name}Handler".format(name=name)
        if filename:
            handlersConfig[handler] = {
                "class": "logging.FileHandler",
                "formatter": "ITERARRAYFormatter",
                "filename": filename,
            }
        else:
            handlersConfig[handler] = {
                "class": "logging.StreamHandler",
                "formatter": "ITERARRAYFormatter",
                "stream": "ext://sys.stderr",
            }
        loggingConfig.update({
            "{name}Logger".format(name=name):
            {
                "handlers": [handler],
                "level": verbose_levels[verbosity],
            },
        })
        dict_log_config = {
            "version": 1,
            "handlers": handlersConfig,
            "loggers": loggingConfig,
            "formatters":
            {
                "ITERARRAYFormatter":
                {
                    "format": "[%(asctime)-15s] %(module)-9s "
                              "%(levelname)-7s %(message)s",
                },
            },
        }
        dictConfig(dict_log_config)
        return logging.getLogger("{name}Logger".format(name=name))


def getDefaultDepth():
    """Return the depth of a chain, from ITERARRAY_DEPTH if it is set."""
    value = os.environ.get("ITERARRAY_DEPTH")
    if value is None:
        return iterarray.MAX_DEPTH
    depth = int(value)
    if depth < 1:
        raise ValueError("ITERARRAY_DEPTH must be at least 1, got {0}"
                         .format(depth))
    return depth


def parseRequest(text):
    """Parse a line typed by the operator into an integer."""
    try:
        return int(text.strip())
    except ValueError:
        raise ValueError("Not an integer: {0!r}".format(text.strip()))


def checkRequest(n, depth):
    """Reject requests a chain of the given depth cannot serve."""
    if n < 0:
        raise OutOfRange("Sorry, the factorial of a negative number ({0}) "
                         "is not defined".format(n))
    if n > depth:
        raise OutOfRange("Sorry, this number is too big. You can choose a "
                         "number up to {0}".format(depth))
    return n


def wrapInteger(value, width=None):
    """Wrap value into a signed two's complement integer of width bits, as
    a machine integer would. A width of None leaves value untouched."""
    if width is None:
        return value
    value &= (1 << width) - 1
    if value >= 1 << (width - 1):
        value -= 1 << width
    return value
