import os
import threading
import instructor
from flask import Flask, render_template, request, redirect, url_for, flash, send_file, jsonify
from pydantic import ValidationError
from openai import OpenAI
from dotenv import load_dotenv

# --- IMPORTS FROM OUR FILES ---
from config import CONFIG, MISSING_INTEREST_NOTICE, SUGGESTION_FAILED_NOTICE
from utils import cleanup_old_exports, ensure_directory_exists, split_requirements

# Import services
from services.local_storage import LocalStorage
from services.plan_store import PlanStore, validate_field_value
from services.signature_pad import SignaturePad, PointerEvent
from services.suggestion_generator import auto_fill_suggestions
from services.document_renderer import document_filename, generate_pdf, render_document_html


# --- APPLICATION SETUP ---
load_dotenv()

# Text inputs on the planner form, by form field name
FORM_TEXT_FIELDS = [
    "first_name", "last_name", "field", "selected_job_option",
    "location", "company", "company_url", "reason",
]


def create_openai_client() -> OpenAI:
    return instructor.patch(OpenAI(api_key=os.getenv("OPENAI_API_KEY")))


def create_app(plan_store=None, suggestion_client=None, signature_pad=None, config=CONFIG) -> Flask:
    """
    Builds the planner app around one PlanStore. Without a store, the saved plan
    (if any) is loaded from local storage, as on a fresh start.
    """
    app = Flask(__name__)
    app.secret_key = os.urandom(24)

    if plan_store is None:
        plan_store = PlanStore(
            LocalStorage(config["storage_path"]),
            storage_key=config["storage_key"],
            saved_delay=config["save_status_delay_seconds"],
        )
        plan_store.load()

    # The pad knows nothing about the plan; its output is forwarded into the store.
    if signature_pad is None:
        signature_pad = SignaturePad()
    signature_pad.on_stroke_committed = lambda image: plan_store.set_field("signature_data", image)
    signature_pad.on_cleared = lambda: plan_store.set_field("signature_data", None)

    # Held while a suggestion request is in flight
    generating = threading.Lock()
    clients = {"suggestions": suggestion_client}

    def get_suggestion_client():
        if clients["suggestions"] is None:
            clients["suggestions"] = create_openai_client()
        return clients["suggestions"]

    app.extensions["plan_store"] = plan_store
    app.extensions["signature_pad"] = signature_pad

    # --- FLASK ROUTES ---
    @app.route('/')
    def home():
        """Displays the planner form with the signature pad."""
        return render_template(
            'planner.html',
            plan=plan_store.record,
            job_choices=plan_store.record.job_option_choices(),
            requirements_text='\n'.join(plan_store.record.requirements),
            save_status=plan_store.status,
            is_generating=generating.locked(),
            document_name=document_filename(plan_store.record),
            active_tab='planner'
        )

    @app.route('/preview')
    def preview():
        """Displays the paginated document around the rendered plan."""
        return render_template(
            'preview.html',
            plan=plan_store.record,
            document_name=document_filename(plan_store.record),
            active_tab='preview'
        )

    @app.route('/preview/document')
    def preview_document():
        """Serves the printable document itself (framed by the preview page)."""
        return render_document_html(plan_store.record, config["document"])

    @app.route('/plan/update', methods=['POST'])
    def update_plan():
        """Applies the submitted planner form to the current plan."""
        updates = {name: request.form[name] for name in FORM_TEXT_FIELDS if name in request.form}
        if 'requirements' in request.form:
            updates['requirements'] = split_requirements(request.form['requirements'])

        if updates:
            plan_store.set_fields(updates)

        if request.form.get('next') == 'preview':
            return redirect(url_for('preview'))
        return redirect(url_for('home'))

    @app.route('/plan/field', methods=['POST'])
    def update_field():
        """Replaces one field from a JSON body: {"name": ..., "value": ...}."""
        payload = request.get_json(silent=True) or {}
        name = payload.get('name')
        if not name:
            return jsonify({"error": "Missing field name."}), 400
        if 'value' not in payload:
            return jsonify({"error": "Missing field value."}), 400
        try:
            value = validate_field_value(name, payload['value'])
        except KeyError as e:
            return jsonify({"error": str(e)}), 400
        except ValidationError as e:
            return jsonify({"error": f"Invalid value for {name}: {e.errors()[0]['msg']}"}), 400
        record = plan_store.set_field(name, value)
        return jsonify({"plan": record.model_dump(by_alias=True), "status": plan_store.status})

    @app.route('/plan/save', methods=['POST'])
    def save_plan():
        """Persists the current plan to local storage."""
        try:
            plan_store.save()
        except OSError as e:
            flash(f"Error saving plan: {e}")
        return redirect(url_for('home'))

    @app.route('/plan/status')
    def plan_status():
        return jsonify({"status": plan_store.status})

    @app.route('/signature/event', methods=['POST'])
    def signature_event():
        """Feeds one pointer/touch event (or a clear) from the planner canvas to the pad."""
        payload = request.get_json(silent=True) or {}
        kind = payload.get('type', '')
        try:
            event = PointerEvent.from_dict(payload) if kind in ('down', 'move') else None
            signature_pad.handle_event(kind, event)
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"error": f"Invalid signature event: {e}"}), 400
        return jsonify({
            "drawing": signature_pad.is_drawing,
            "hasSignature": plan_store.record.signature_data is not None,
            "status": plan_store.status,
        })

    @app.route('/suggestions', methods=['POST'])
    def suggestions():
        """Auto-fills job options, company URL and requirements from the field of interest."""
        if not (plan_store.record.field or "").strip():
            flash(MISSING_INTEREST_NOTICE)
            return redirect(url_for('home'))
        if not generating.acquire(blocking=False):
            flash("Suggestions are already being generated.")
            return redirect(url_for('home'))
        try:
            try:
                client = get_suggestion_client()
            except Exception as e:
                print(f"❌ Could not create the suggestion client: {e}")
                client = None

            if client is None:
                flash(SUGGESTION_FAILED_NOTICE)
            else:
                outcome = auto_fill_suggestions(
                    plan_store, client, config["openai_model"], config["openai_parameters"]
                )
                flash(outcome.notice or "✅ Suggestions applied.")
        finally:
            generating.release()
        return redirect(url_for('home'))

    @app.route('/export/pdf')
    def export_pdf():
        """Generates and downloads the printable plan."""
        try:
            pdf_path = generate_pdf(plan_store.record, config["export_dir"], config["document"])
            return send_file(os.path.abspath(pdf_path), as_attachment=True, download_name=os.path.basename(pdf_path))
        except Exception as e:
            flash(f"An error occurred while exporting the plan: {e}")
            return redirect(url_for('preview'))

    return app


# --- MAIN EXECUTION ---
if __name__ == '__main__':
    # Ensure required directories exist
    ensure_directory_exists(CONFIG["data_dir"])
    ensure_directory_exists(CONFIG["export_dir"])

    # Clean up old exports
    cleanup_old_exports(CONFIG["export_dir"], days=30)

    create_app().run(debug=True)
