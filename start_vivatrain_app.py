import os

from dotenv import load_dotenv

# .env must be loaded before Config reads the environment
load_dotenv()

from vivatrain_app import create_app  # noqa: E402
from vivatrain_app.core.logging_config import setup_logging  # noqa: E402

app = create_app()
setup_logging(app, log_level=app.config.get('LOG_LEVEL', 'INFO'), log_dir=os.environ.get('LOG_DIR'))

if __name__ == '__main__':
    app.run(
        host=os.environ.get('HOST', '0.0.0.0'),
        port=int(os.environ.get('PORT', 5000)),
        debug=os.environ.get('FLASK_DEBUG', '0') == '1',
    )
