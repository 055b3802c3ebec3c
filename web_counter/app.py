from flask import Flask, jsonify
from werkzeug.exceptions import MethodNotAllowed

from .errors import StoreError
from .store import CounterStore

TEXT = {"Content-Type": "text/plain; charset=utf-8"}


def create_app(store: CounterStore) -> Flask:
    app = Flask(__name__)

    # no automatic OPTIONS: everything but POST gets a 405
    @app.post("/api/count", provide_automatic_options=False)
    def count():
        return jsonify(count=store.increment_and_get())

    @app.get("/")
    def hello():
        return "Hello, world!!\n", 200, TEXT

    @app.errorhandler(StoreError)
    def store_failed(exc):
        return f"{exc}\n", 500, TEXT

    @app.errorhandler(MethodNotAllowed)
    def wrong_method(exc):
        headers = dict(TEXT)
        if exc.valid_methods:
            headers["Allow"] = ", ".join(exc.valid_methods)
        return "Invalid request method\n", 405, headers

    return app
