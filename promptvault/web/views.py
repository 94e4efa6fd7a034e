from flask import current_app, flash, redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from . import web_bp
from .session import clear_token, login_required, store_token
from ..errors import EmailAlreadyRegistered, PromptNotFound, StorageError, UpstreamError
from ..extensions import db
from ..services import auth_service, output_service, prompt_service
from ..services.gemini_service import GeminiService
from ..services.prompt_builder import ALL_MODELS, TARGET_MODELS

MODEL_CHOICES = (ALL_MODELS, *TARGET_MODELS)


def _safe_next(target, fallback=None):
    # only allow local redirects
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return fallback or url_for("web.generator")


@web_bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        user = auth_service.authenticate(request.form.get("email"), request.form.get("password"))
        if user is None:
            flash("Invalid email or password.", "danger")
        else:
            store_token(auth_service.issue_token(user))
            flash("Signed in.", "success")
            return redirect(_safe_next(request.args.get("next")))
    return render_template("login.html", mode="login")


@web_bp.route("/signup", methods=["GET", "POST"])
def signup():
    if request.method == "POST":
        try:
            user = auth_service.register_user(request.form.get("email"), request.form.get("password"))
            store_token(auth_service.issue_token(user))
            flash("Account created.", "success")
            return redirect(url_for("web.generator"))
        except EmailAlreadyRegistered:
            flash("An account with that email already exists.", "danger")
        except ValueError as e:
            flash(str(e), "danger")
    return render_template("login.html", mode="signup")


@web_bp.route("/logout", methods=["POST"])
def logout():
    clear_token()
    flash("Signed out.", "info")
    return redirect(url_for("web.login"))


@web_bp.route("/", methods=["GET"])
@login_required
def generator(user):
    return render_template("generator.html", user=user, models=MODEL_CHOICES, selected=ALL_MODELS)


@web_bp.route("/generate", methods=["POST"])
@login_required
def generate(user):
    prompt = (request.form.get("prompt") or "").strip()
    target_model = request.form.get("target_model") or ALL_MODELS
    generated = None
    if not prompt:
        flash("Please enter a prompt.", "warning")
    else:
        try:
            generated = GeminiService(current_app.config).generate(prompt, target_model)
            flash("Prompt optimized.", "success")
        except ValueError as e:
            flash(str(e), "warning")
        except UpstreamError:
            current_app.logger.exception("Gemini generation failed")
            flash("Failed to generate prompt. Please try again.", "danger")
    return render_template(
        "generator.html",
        user=user,
        models=MODEL_CHOICES,
        selected=target_model,
        prompt=prompt,
        generated=generated,
    )


@web_bp.route("/save", methods=["POST"])
@login_required
def save(user):
    try:
        prompt_service.create_prompt(
            user.id,
            generated_prompt=request.form.get("generated_prompt"),
            target_model=request.form.get("target_model"),
            original_prompt=request.form.get("original_prompt"),
        )
        flash("Saved to your vault.", "success")
        return redirect(url_for("web.vault"))
    except ValueError as e:
        flash(str(e), "warning")
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Database insert error")
        flash("Failed to save prompt.", "danger")
    return redirect(url_for("web.generator"))


@web_bp.route("/vault", methods=["GET"])
@login_required
def vault(user):
    search = request.args.get("search", "")
    category = request.args.get("category") or ALL_MODELS
    rows = prompt_service.list_prompts(user.id, search=search, category=category)
    prompts = [prompt_service.to_display(p) for p in rows]

    categories = list(MODEL_CHOICES)
    categories += [c for c in prompt_service.list_categories(user.id) if c not in categories]
    stats = {
        "total": len(prompts),
        "starred": sum(1 for p in prompts if p["starred"]),
        "uses": sum(p["usage_count"] or 0 for p in prompts),
    }
    return render_template(
        "vault.html",
        user=user,
        prompts=prompts,
        categories=categories,
        search=search,
        category=category,
        stats=stats,
    )


@web_bp.route("/vault/new", methods=["POST"])
@login_required
def create(user):
    """Creation modal: goes through the same write path as the save endpoint."""
    tags = [t for t in (request.form.get("tags") or "").split(",") if t.strip()] or None
    try:
        prompt_service.create_prompt(
            user.id,
            generated_prompt=request.form.get("content"),
            target_model=request.form.get("category"),
            original_prompt=request.form.get("title"),
            tags=tags,
            starred=request.form.get("starred") == "on",
        )
        flash("Prompt created.", "success")
    except ValueError as e:
        flash(str(e), "warning")
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Database insert error")
        flash("Failed to create prompt.", "danger")
    return redirect(url_for("web.vault"))


@web_bp.route("/vault/<string:prompt_id>", methods=["GET"])
@login_required
def detail(user, prompt_id):
    try:
        prompt = prompt_service.get_prompt(user.id, prompt_id)
    except PromptNotFound:
        flash("Prompt not found.", "warning")
        return redirect(url_for("web.vault"))
    return render_template("detail.html", user=user, prompt=prompt_service.to_display(prompt))


@web_bp.route("/vault/<string:prompt_id>/upload", methods=["POST"])
@login_required
def upload(user, prompt_id):
    file = request.files.get("file")
    if not file or not file.filename:
        flash("No file selected.", "warning")
        return redirect(url_for("web.detail", prompt_id=prompt_id))
    try:
        output_service.upload_output(current_app.config, user.id, prompt_id, file)
        flash("Upload successful!", "success")
    except PromptNotFound:
        flash("Prompt not found.", "warning")
        return redirect(url_for("web.vault"))
    except (StorageError, SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception("Output upload failed")
        flash("Upload failed.", "danger")
    return redirect(url_for("web.detail", prompt_id=prompt_id))


@web_bp.route("/vault/<string:prompt_id>/star", methods=["POST"])
@login_required
def star(user, prompt_id):
    try:
        prompt = prompt_service.toggle_star(user.id, prompt_id)
        flash("Starred." if prompt.starred else "Unstarred.", "success")
    except PromptNotFound:
        flash("Prompt not found.", "warning")
    return redirect(_safe_next(request.form.get("next"), url_for("web.vault")))


@web_bp.route("/vault/<string:prompt_id>/use", methods=["POST"])
@login_required
def use(user, prompt_id):
    try:
        prompt_service.record_usage(user.id, prompt_id)
        flash("Copied!", "success")
    except PromptNotFound:
        flash("Prompt not found.", "warning")
    return redirect(_safe_next(request.form.get("next"), url_for("web.detail", prompt_id=prompt_id)))
