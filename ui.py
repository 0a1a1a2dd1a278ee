import html

import streamlit as st


def setup_style():
    st.markdown("""
    <style>
        :root {
            --accent: #4f46e5;
            --accent-soft: #e0e7ff;
            --card-bg: #f9fafb;
            --card-border: #e5e7eb;
            --text-main: #374151;
        }

        .stApp {
            background: linear-gradient(135deg, #e0e7ff 0%, #dbeafe 100%);
        }

        .main .block-container {
            max-width: 42rem;
            background: #ffffff;
            border-radius: 1rem;
            box-shadow: 0 10px 30px rgba(79, 70, 229, 0.12);
            padding: 2rem 2rem 2.5rem 2rem;
            margin-top: 3rem;
        }

        h1, h2, h3 {
            color: var(--accent);
        }

        .post-card {
            border: 1px solid var(--card-border);
            background: var(--card-bg);
            border-radius: 0.75rem;
            padding: 1.1rem 1.25rem 0.6rem 1.25rem;
            margin-bottom: 0.5rem;
        }

        .post-card h4 {
            color: var(--accent);
            margin: 0 0 0.4rem 0;
        }

        .post-card p {
            color: var(--text-main);
            font-size: 0.9rem;
            white-space: pre-wrap;
        }

        .skeleton-line {
            height: 0.9rem;
            border-radius: 0.4rem;
            margin: 0.5rem 0;
            background: linear-gradient(90deg, #eef2ff 25%, #e0e7ff 37%, #eef2ff 63%);
            background-size: 400% 100%;
            animation: shimmer 1.4s ease infinite;
        }

        @keyframes shimmer {
            0% { background-position: 100% 50%; }
            100% { background-position: 0 50%; }
        }
    </style>
    """, unsafe_allow_html=True)


def render_post_card(post):
    # Post text is user content; escape before handing it to markdown as HTML.
    st.markdown(
        f"""
        <div class="post-card">
            <h4>{html.escape(post.title)}</h4>
            <p>{html.escape(post.content)}</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_skeleton_posts(num_posts=3):
    for _ in range(num_posts):
        st.markdown(
            """
            <div class="post-card">
                <div class="skeleton-line" style="width: 45%"></div>
                <div class="skeleton-line" style="width: 90%"></div>
                <div class="skeleton-line" style="width: 70%"></div>
            </div>
            """,
            unsafe_allow_html=True,
        )
