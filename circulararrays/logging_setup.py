import os
import logging
import logging.config


def setup_logging(debug=False, logfile=None):
    """
    Configure the ``circulararrays`` logger.

    Parameters
    ----------
    debug : bool
        Log allocation, registration and structural mutation at DEBUG level.
    logfile : str or None
        If given, also write dated records to this file.
    """
    handlers = ['console']
    logging_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '{levelname:8s} {message}',
                'style': '{',
            },
            'dated': {
                'format': '{asctime} {levelname} ({filename}:{lineno}) {message}',
                'style': '{',
                'datefmt': '%Y-%m-%d %H:%M:%S',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': 'DEBUG' if debug else 'INFO',
                'stream': 'ext://sys.stderr',
                'formatter': 'simple',
            },
        },
        'loggers': {
            'circulararrays': {
                'level': 'DEBUG' if debug else 'INFO',
                'propagate': False,
                'handlers': handlers,
            },
        },
    }

    if logfile is not None:
        logdir = os.path.dirname(logfile)
        if logdir:
            os.makedirs(logdir, exist_ok=True)
        handlers.append('logfile')
        logging_config['handlers']['logfile'] = {
            'class': 'logging.FileHandler',
            'level': 'DEBUG' if debug else 'INFO',
            'formatter': 'dated',
            'filename': logfile,
        }

    logging.config.dictConfig(logging_config)

    return logging.getLogger('circulararrays')
