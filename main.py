import os

from clinic.app_factory import create_app


app = create_app()


if __name__ == "__main__":
    """
    Entrypoint for the patient portal and admin console.
    Use `flask --app main run` or a WSGI server (gunicorn main:app) in production.
    """
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5001")), debug=app.config.get("DEBUG", False))
