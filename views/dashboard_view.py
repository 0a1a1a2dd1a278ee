import streamlit as st

import ui
from use_cases.form_validation import validate_post
from utils import session_manager


def _show_notice():
    if st.session_state.post_notice:
        st.error(st.session_state.post_notice)


def _after_sync(result):
    if result.success:
        st.session_state.post_notice = None
        st.session_state.post_form_nonce += 1
        st.rerun()
    elif result.reason == "stale":
        # Session ended while the call was out; the page is about to leave.
        st.rerun()
    else:
        st.session_state.post_notice = result.message
        st.rerun()


def _render_post_form(manager):
    draft = manager.pending_edit
    editing = draft.editing_id is not None
    st.subheader("Edit Post" if editing else "Create New Post")
    _show_notice()

    form_key = f"{draft.editing_id or 'new'}_{st.session_state.post_form_nonce}"
    with st.form(f"post_form_{form_key}", clear_on_submit=False):
        title = st.text_input("Title", value=draft.title, placeholder="Post title")
        content = st.text_area("Content", value=draft.content, placeholder="Post content", height=120)
        busy = editing and manager.is_pending(draft.editing_id)
        submitted = st.form_submit_button("Update" if editing else "Create", type="primary", disabled=busy)

    if editing and st.button("Cancel edit", key=f"cancel_{form_key}"):
        manager.cancel_edit()
        st.session_state.post_notice = None
        st.rerun()

    if submitted:
        errors = validate_post(title, content)
        if errors:
            for message in errors.values():
                st.error(message)
            return
        manager.set_draft(title, content)
        if editing:
            _after_sync(manager.update())
        else:
            _after_sync(manager.create(title, content))


def _render_post_list(manager):
    st.subheader("Your Posts")
    if not manager.posts:
        st.caption("No posts found.")
        return

    for post in manager.posts:
        ui.render_post_card(post)
        busy = manager.is_pending(post.id)
        c_edit, c_delete, _ = st.columns([1, 1, 4])
        if c_edit.button("Edit", key=f"edit_{post.id}", disabled=busy):
            manager.begin_edit(post)
            st.session_state.post_notice = None
            st.rerun()
        if c_delete.button("Delete", key=f"delete_{post.id}", disabled=busy):
            _after_sync(manager.delete(post.id))


def render_dashboard(identity):
    manager = session_manager.get_post_manager()

    c_title, c_logout = st.columns([4, 1])
    c_title.header(f"Welcome, {identity.name}")
    if c_logout.button("Logout", key="logout_btn", type="secondary"):
        st.session_state.post_manager = None
        st.session_state.post_notice = None
        manager.close()
        session_manager.logout()

    if manager.state != "ready":
        placeholder = st.empty()
        with placeholder.container():
            st.caption("Loading your posts...")
            ui.render_skeleton_posts()
        manager.ensure_loaded()
        placeholder.empty()

    _render_post_form(manager)
    st.divider()
    _render_post_list(manager)
