import logging
import os


def get_logger(name='indexed_pq'):
  logger = logging.getLogger(name)
  logging.basicConfig(format="[%(asctime)s %(levelname)s]: %(message)s")
  debug = os.environ.get('INDEXED_PQ_DEBUG', False)
  debug = debug == 'true' or debug == '1'
  logger.setLevel(logging.DEBUG if debug else logging.INFO)
  return logger
