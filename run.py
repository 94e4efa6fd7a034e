import os

from promptvault import create_app
from promptvault.extensions import db

# Create the Flask app instance using the application factory
# It will load the config based on FLASK_CONFIG or default to 'development'
config_name = os.getenv('FLASK_CONFIG') or 'default'
app = create_app(config_name)


@app.shell_context_processor
def make_shell_context():
    """Provides a shell context for `flask shell` command."""
    from promptvault.models import Prompt, User
    return {'db': db, 'Prompt': Prompt, 'User': User}


if __name__ == '__main__':
    # For production, use a proper WSGI server like Gunicorn or Waitress.
    print("API docs available at: http://127.0.0.1:5000/api/docs/")
    app.run(threaded=True)
