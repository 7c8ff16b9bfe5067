"""
Site CMS Backend
Application Entry Point

This file serves as the entry point for the Flask application.
It uses the application factory pattern defined in the sitecms package.
"""

import os

from dotenv import load_dotenv

load_dotenv()

from sitecms import create_app  # noqa: E402

# Create the Flask application using the factory
app = create_app()

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 3000)))
