import logging
from flask import Blueprint, jsonify, request, current_app

from formfixer.errors import FormFixerError, InvalidInput

logger = logging.getLogger(__name__)

api_router = Blueprint('api_router', __name__)


# --- HELPER FUNCTIONS ---

def get_form_controller():
    """Retrieves the form controller from the Flask application context."""
    controller = current_app.config.get('FORM_CONTROLLER')
    if not controller:
        raise RuntimeError("FormController is not set in app.config['FORM_CONTROLLER']")
    return controller


def get_html_payload() -> str:
    """Extracts `html` from the JSON body; a missing body counts as missing html."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput("HTML is required.")
    return data.get('html')


@api_router.errorhandler(FormFixerError)
def handle_formfixer_error(e: FormFixerError):
    if e.status_code >= 500:
        logger.error(f"{request.path} failed: {e}")
    return jsonify({"error": str(e)}), e.status_code


# --- API ROUTES ---

@api_router.route('/analyze', methods=['POST'])
def analyze():
    """Reports missing `required`/label issues and returns the repaired markup."""
    try:
        result = get_form_controller().analyze(get_html_payload())
        return jsonify(result.to_dict())
    except FormFixerError:
        raise
    except Exception as e:
        logger.error(f"Error analyzing HTML: {e}", exc_info=True)
        return jsonify({"error": "Analysis failed.", "details": str(e)}), 500


@api_router.route('/schema', methods=['POST'])
def schema():
    """Generates a JSON Schema from the form controls in the markup."""
    try:
        form_schema = get_form_controller().derive_schema(get_html_payload())
        return jsonify({"schema": form_schema.to_dict()})
    except FormFixerError:
        raise
    except Exception as e:
        logger.error(f"Error deriving schema: {e}", exc_info=True)
        return jsonify({"error": "Schema generation failed.", "details": str(e)}), 500


@api_router.route('/accessibility', methods=['POST'])
def accessibility():
    """Runs axe-core against the rendered markup and returns its violations."""
    try:
        result = get_form_controller().check_accessibility(get_html_payload())
        return jsonify(result.to_dict())
    except FormFixerError:
        raise
    except Exception as e:
        logger.error(f"Error during accessibility analysis: {e}", exc_info=True)
        return jsonify({"error": "Accessibility analysis failed.", "details": str(e)}), 500
