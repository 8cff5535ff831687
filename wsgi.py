# wsgi.py
from werkzeug.middleware.dispatcher import DispatcherMiddleware
from app import configure_logging, matchmaker_app, oracle_app

configure_logging()

# Matchmaker at the root, oracle (mint/hatch/pets) under /oracle
application = DispatcherMiddleware(matchmaker_app, {
    "/oracle": oracle_app
})
