import os
from workpay import create_app

# Create the Flask app instance
app = create_app()

if __name__ == "__main__":
    # Run the development server; use a WSGI server in production
    app.run(debug=app.config['APP_ENV'] == 'development', host="0.0.0.0", port=int(os.getenv("PORT", 5000)))
