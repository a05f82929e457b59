import logging
import importlib

from querybind.database.db import Db
from querybind.template.parser import PARAMSTYLES

logger = logging.getLogger(__name__)


class GenericDb(Db):
    """
    Generic execution unit for any DB-API 2.0 compliant driver.
    """

    def __init__(self, client):
        super().__init__(client)
        self._configure_paramstyle(client.get('db_lib'))

    def _configure_paramstyle(self, db_lib_name):
        """
        Read the parameter style from the driver module.
        Defaults to 'qmark' if the driver is unknown.
        """
        if not db_lib_name:
            return
        try:
            module = importlib.import_module(db_lib_name)
        except ImportError as e:
            logger.warning(f"Could not check paramstyle for {db_lib_name}: {e}")
            return

        style = getattr(module, 'paramstyle', 'qmark')
        logger.debug(f"Detected paramstyle '{style}' for driver '{db_lib_name}'")
        if style not in PARAMSTYLES:
            logger.warning(f"Paramstyle '{style}' is not supported, using '{self.paramstyle}'")
            return
        self.paramstyle = style
