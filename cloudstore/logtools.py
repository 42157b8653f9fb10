"""Logging tools"""
import json
import logging
import sys
import time

import ecs_logging

from cloudstore.exceptions import LoggingException


def de_dot(dot_string, msg):
    """
    Turn message and dotted string into a nested dictionary. Used by :py:class:`LogstashFormatter`

    :param dot_string: The dotted string
    :param msg: The message

    :type dot_string: str
    :type msg: str
    """
    arr = dot_string.split('.')
    arr.append(msg)
    retval = None
    for idx in range(len(arr), 1, -1):
        try:
            if not retval:
                retval = {arr[idx-2]: arr[idx-1]}
            else:
                retval = {arr[idx-2]: retval}
        except Exception as err:
            raise LoggingException(f'Unable to nest {dot_string}: {err}') from err
    return retval


def deepmerge(source, destination):
    """
    Recursively merge deeply nested dictionary structures, ``source`` into ``destination``

    :param source: Source dictionary
    :param destination: Destination dictionary

    :type source: dict
    :type destination: dict

    :returns: destination
    :rtype: dict
    """
    for key, value in source.items():
        if isinstance(value, dict):
            node = destination.setdefault(key, {})
            deepmerge(value, node)
        else:
            destination[key] = value
    return destination


class LogstashFormatter(logging.Formatter):
    """Logstash formatting (JSON)"""
    # LogRecord attributes carried over, mapped to the output key
    WANTED_ATTRS = {
        'levelname': 'loglevel',
        'funcName': 'function',
        'lineno': 'linenum',
        'message': 'message',
        'name': 'name'
    }

    def format(self, record):
        """
        :param record: The incoming log message

        :rtype: :py:meth:`json.dumps`
        """
        self.converter = time.gmtime
        timestamp = '%s.%03dZ' % (
            self.formatTime(record, datefmt='%Y-%m-%dT%H:%M:%S'), record.msecs)
        result = {'@timestamp': timestamp}
        available = dict(record.__dict__)
        # 'message' is not an attribute of the record until formatted
        available['message'] = record.getMessage()
        for attribute in set(self.WANTED_ATTRS).intersection(available):
            result = deepmerge(
                de_dot(self.WANTED_ATTRS[attribute], available[attribute]), result
            )
        if record.exc_info:
            result['exception'] = self.formatException(record.exc_info)
        return json.dumps(result, sort_keys=True)


class Whitelist(logging.Filter):
    """How to whitelist logs"""
    # pylint: disable=super-init-not-called
    def __init__(self, *whitelist):
        self.whitelist = [logging.Filter(name) for name in whitelist]

    def filter(self, record):
        return any(f.filter(record) for f in self.whitelist)


class Blacklist(Whitelist):
    """Blacklist monkey-patch of Whitelist"""
    def filter(self, record):
        return not Whitelist.filter(self, record)


class LogInfo:
    """Logging Class"""
    def __init__(self, cfg):
        """Class Setup

        :param cfg: The logging configuration
        :type: cfg: dict
        """
        loglevel = cfg.get('loglevel')
        if loglevel is None:
            loglevel = 'INFO'
        logfile = cfg.get('logfile')
        logformat = cfg.get('logformat') or 'default'
        #: Attribute. The numeric equivalent of ``cfg['loglevel']``
        if isinstance(loglevel, int):
            self.numeric_log_level = loglevel
        else:
            self.numeric_log_level = getattr(logging, str(loglevel).upper(), None)
        #: Attribute. The logging format string to use.
        self.format_string = '%(asctime)s %(levelname)-9s %(message)s'

        if not isinstance(self.numeric_log_level, int):
            raise ValueError(f"Invalid log level: {loglevel}")

        #: Attribute. Which logging handler to use
        if logfile:
            self.handler = logging.FileHandler(logfile)
        else:
            self.handler = logging.StreamHandler(stream=sys.stderr)

        if self.numeric_log_level == 10: # DEBUG
            self.format_string = (
                '%(asctime)s %(levelname)-9s %(name)22s %(funcName)22s:%(lineno)-4d %(message)s')

        if logformat in ('json', 'logstash'):
            self.handler.setFormatter(LogstashFormatter())
        elif logformat == 'ecs':
            self.handler.setFormatter(ecs_logging.StdlibFormatter())
        else:
            self.handler.setFormatter(logging.Formatter(self.format_string))
