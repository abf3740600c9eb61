import logging

logger = logging.getLogger("IQWav")


def setup_logging(level="INFO", logfile=None):
    logger.setLevel(level)

    # handlers from an earlier call would still point at old streams
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    # create formatter and add it to the handlers
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(filename)s - %(levelname)s - %(message)s")

    # create console handler
    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    # file handler only when asked for, conversions are usually one-shot
    if logfile is not None:
        fh = logging.FileHandler(logfile)
        fh.setLevel(level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)
