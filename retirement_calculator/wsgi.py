#setup: pip install -e ".[test]"
#setup: flask --app retirement_calculator.wsgi run --port 5000 --debug

import logging

from retirement_calculator.app import create_app

logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app()

if __name__ == "__main__":
    app.run(port=5000, debug=True)
