"""
Owner dashboard: create and manage the owner's shop or hospital.

``GET /owner-dashboard?tab=<overview|medicines|doctors|tests|services>``
renders the panel; every change posts back with an ``action`` field.  The
resource is reloaded from the backend on each request so an edit always
starts from the stored collection.  Successful changes redirect (post,
redirect, get); a client-side validation error re-renders the form with the
message, and a backend refusal is shown as a blocking alert with nothing
changed.
"""
from __future__ import annotations

import logging
from urllib.parse import urlencode

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from directory.exceptions import ActionFailed, ValidationFailed
from directory.geolocation import GeoOptions
from directory.models import HOSPITAL_TYPES, record_id
from directory.owner import HOSPITAL_KIND, HospitalDraft, OwnerPanel
from directory.permissions import owner_required
from directory.services.audit import log_action

logger = logging.getLogger(__name__)

DRAFT_KEY = 'owner:hospital_draft'
OWNER_URL = '/owner-dashboard'

COLLECTION_ACTIONS = ('add', 'edit', 'delete', 'stock')
ACTION_DONE = {
    'add': 'added', 'edit': 'saved', 'delete': 'deleted', 'stock': 'updated',
}


def _tab_url(tab: str = '') -> str:
    return f'{OWNER_URL}?{urlencode({"tab": tab})}' if tab else OWNER_URL


def _render(request, panel: OwnerPanel, *, tab: str = '', form=None, errors=None,
            error: str = '', blocking_alert: str = '', edit=None, status: int = 200):
    tab_names = [name for name, _ in panel.tabs]
    tab = tab if tab in tab_names else (tab_names[0] if tab_names else '')
    spec = panel.spec(tab) if tab and tab != 'overview' else None
    draft = HospitalDraft(request.session.get(DRAFT_KEY)) if panel.kind is HOSPITAL_KIND else None
    items = ((panel.resource or {}).get(spec.name) or []) if spec else []

    # ``edit`` is an item index on a collection tab, or "details" on the overview
    try:
        edit_index = int(edit) if edit not in (None, '') else None
    except (TypeError, ValueError):
        edit_index = None
    if edit_index is not None and not 0 <= edit_index < len(items):
        edit_index = None
    if form:
        add_values, edit_values = ({}, form) if edit_index is not None else (form, {})
    else:
        add_values, edit_values = {}, (items[edit_index] if edit_index is not None else {})

    context = {
        'panel': panel,
        'kind': panel.kind,
        'resource': panel.resource,
        'tab': tab,
        'spec': spec,
        'items': items,
        'add_values': add_values,
        'edit_values': edit_values,
        'edit_index': edit_index,
        'editing_details': edit == 'details',
        'draft': draft,
        'draft_specs': HOSPITAL_KIND.collections if draft else (),
        'hospital_types': HOSPITAL_TYPES,
        'geo_options': GeoOptions.from_settings().as_js(),
        'form': form or {},
        'errors': errors or {},
        'error': error,
        'blocking_alert': blocking_alert,
    }
    return render(request, 'directory/owner/dashboard.html', context, status=status)


def _create(request, panel: OwnerPanel):
    draft = HospitalDraft(request.session.get(DRAFT_KEY)) if panel.kind is HOSPITAL_KIND else None
    try:
        created = panel.create(request.POST, draft.to_state() if draft else None)
    except ValidationFailed as e:
        return _render(request, panel, form=request.POST, errors=e.errors, error=e.message, status=400)
    except ActionFailed as e:
        return _render(request, panel, form=request.POST, blocking_alert=e.message, status=400)
    request.session.pop(DRAFT_KEY, None)
    log_action(user=request.app_session.user, action='create', object_type=panel.kind.noun,
               object_id=record_id(created))
    messages.success(request, f'Your {panel.kind.noun} has been created')
    return redirect(OWNER_URL)


def _draft(request, panel: OwnerPanel, action: str):
    draft = HospitalDraft(request.session.get(DRAFT_KEY))
    collection = request.POST.get('collection', '')
    try:
        if action == 'draft_add':
            draft.add(collection, request.POST)
        else:
            draft.remove(collection, request.POST.get('index'))
    except ValidationFailed as e:
        return _render(request, panel, error=e.message, status=400)
    request.session[DRAFT_KEY] = draft.to_state()
    return redirect(OWNER_URL)


def _collection(request, panel: OwnerPanel, action: str):
    post = request.POST
    tab = post.get('collection', '')
    try:
        editor = panel.editor(tab)
        if action == 'add':
            editor.add(post)
        elif action == 'edit':
            editor.edit(post.get('index'), post)
        elif action == 'delete':
            editor.delete(post.get('index'))
        else:
            editor.set_stock(post.get('index'), post.get('stock'))
    except ValidationFailed as e:
        return _render(request, panel, tab=tab, form=post, errors=e.errors, error=e.message,
                       edit=post.get('index') if action == 'edit' else None, status=400)
    except ActionFailed as e:
        return _render(request, panel, tab=tab, blocking_alert=e.message, status=400)
    log_action(user=request.app_session.user, action=f'{tab}.{action}', object_type=panel.kind.noun,
               object_id=record_id(panel.resource), detail={'count': len(editor.items)})
    messages.success(request, f'{editor.spec.noun.capitalize()} {ACTION_DONE[action]}')
    return redirect(_tab_url(tab))


def _update_details(request, panel: OwnerPanel):
    try:
        panel.update_details(request.POST)
    except ValidationFailed as e:
        return _render(request, panel, tab='overview', form=request.POST, errors=e.errors,
                       error=e.message, edit='details', status=400)
    except ActionFailed as e:
        return _render(request, panel, tab='overview', blocking_alert=e.message, status=400)
    log_action(user=request.app_session.user, action='update', object_type=panel.kind.noun,
               object_id=record_id(panel.resource))
    messages.success(request, 'Details saved')
    return redirect(_tab_url('overview'))


@owner_required
@require_http_methods(['GET', 'POST'])
def owner_dashboard(request):
    panel = OwnerPanel(request.app_session.client(), request.app_session.role)
    panel.load()

    if request.method == 'GET':
        return _render(request, panel, tab=request.GET.get('tab', ''), edit=request.GET.get('edit'))

    action = request.POST.get('action', '')
    if action == 'create':
        return _create(request, panel)
    if action in ('draft_add', 'draft_remove') and panel.kind is HOSPITAL_KIND:
        return _draft(request, panel, action)
    if action in COLLECTION_ACTIONS:
        return _collection(request, panel, action)
    if action == 'update_details':
        return _update_details(request, panel)
    logger.warning('unknown owner action %r', action)
    return _render(request, panel, error='Unknown action', status=400)
