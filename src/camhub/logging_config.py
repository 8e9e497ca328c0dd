
import logging
import os
from typing import Optional

def configure_logging(level: Optional[str] = None):
    """Configure root logging at `level`, else LOG_LEVEL, else INFO.

    Capture loops log from their own threads, so the thread name is part
    of every record. CAMHUB_LOG_LEVEL sets the camhub loggers separately.
    """
    level = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='[%(asctime)s] [%(threadName)s] [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    camhub_level = os.getenv('CAMHUB_LOG_LEVEL')
    if camhub_level:
        logging.getLogger('camhub').setLevel(getattr(logging, camhub_level.upper(), logging.INFO))
