"""
Blog Routes
"""

from flask import current_app, jsonify, redirect, request, url_for

from sitecms.admin.decorators import admin_required
from sitecms.blog import blog_bp
from sitecms.dependencies import get_blog_store, get_upload_adapter
from sitecms.errors import InvalidUpload
from sitecms.http import request_payload, wants_json
from sitecms.schemas import PostPayload, parse_payload


def _incoming_image(payload):
    """URL of a freshly uploaded image, else the raw `image` field (may be None)."""
    field = current_app.config['UPLOAD_FIELD_NAME']
    files = [f for f in request.files.getlist(field) if f and f.filename]
    if len(files) > 1:
        raise InvalidUpload('Only one image may be uploaded')
    if files:
        return get_upload_adapter().accept(files[0])
    return payload.image


def _done(message, blog=None):
    if not wants_json():
        return redirect(url_for('admin.dashboard'))
    body = {'message': message}
    if blog is not None:
        body['blog'] = blog.to_dict()
    return jsonify(body)


@blog_bp.route('/blogs', methods=['GET'])
@blog_bp.route('/api/blogs', methods=['GET'])
def list_blogs():
    """All posts, newest first (public)"""
    return jsonify(get_blog_store().list())


@blog_bp.route('/add-blog', methods=['POST'])
@admin_required
def add_blog():
    payload = parse_payload(PostPayload, request_payload())
    image_url = _incoming_image(payload)
    blog = get_blog_store().create(
        payload.title, payload.content, image_url=image_url, date=payload.date
    )
    return _done('Blog added successfully!', blog)


@blog_bp.route('/edit-blog/<post_id>', methods=['POST'])
@admin_required
def edit_blog(post_id):
    store = get_blog_store()
    store.get(post_id)
    payload = parse_payload(PostPayload, request_payload())
    image_url = _incoming_image(payload)
    blog = store.update(
        post_id, payload.title, payload.content, image_url=image_url, date=payload.date
    )
    return _done('Blog updated successfully!', blog)


@blog_bp.route('/delete-blog/<post_id>', methods=['POST'])
@admin_required
def delete_blog(post_id):
    get_blog_store().delete(post_id)
    return _done('Blog deleted successfully!')
