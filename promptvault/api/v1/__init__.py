from flask import Blueprint

# Import individual route blueprints
from .auth_routes import auth_bp
from .generate_routes import generate_bp
from .prompt_routes import prompts_bp
from .output_routes import outputs_bp

# Create a master blueprint for the v1 API
api_v1 = Blueprint('api_v1', __name__)

# Register the individual blueprints onto the master v1 blueprint
api_v1.register_blueprint(auth_bp)
api_v1.register_blueprint(generate_bp)
api_v1.register_blueprint(prompts_bp)
api_v1.register_blueprint(outputs_bp)
