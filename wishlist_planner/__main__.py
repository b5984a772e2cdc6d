"""Entry point: python -m wishlist_planner"""

from wishlist_planner.config import server_cfg
from wishlist_planner.logging_config import setup_logging

setup_logging()

from wishlist_planner.api import create_app

app = create_app()
app.run(host=server_cfg.host, port=server_cfg.port, debug=False)
