#!/usr/bin/env python3
"""
Streamlit Createosaur Trait Builder - Web App Version
"""

import streamlit as st
import pandas as pd
import plotly.express as px

from auth import AuthContext, SupabaseAuthProvider
from compatibility import check_candidate, evaluate_selection, group_by_category
from config import configure_logging, load_config
from history import SelectionHistory
from models import TraitSelection
from presets import JsonFileStore, PresetSnapshot, PresetStore
from trait_catalog import default_catalog, load_catalog_file
from trait_lists import TRAIT_CATEGORY_INFO
from websearch import WebSearch, traits_mentioned

# Page configuration
st.set_page_config(
    page_title="🦖 Createosaur Trait Builder",
    page_icon="🦖",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main {
        background: linear-gradient(135deg, #0f1e12 0%, #1a2e1d 50%, #0f1e12 100%);
    }

    [data-testid="stMetricValue"] {
        font-size: 2rem;
        font-weight: 700;
    }

    h3 {
        border-bottom: 2px solid rgba(76, 175, 80, 0.3);
        padding-bottom: 0.5rem;
        margin-top: 2rem;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_config():
    config = load_config()
    configure_logging(config)
    return config


@st.cache_resource
def get_catalog(catalog_file):
    if catalog_file:
        return load_catalog_file(catalog_file)
    return default_catalog()


config = get_config()
catalog = get_catalog(config.trait_catalog_file)
store = JsonFileStore(config.preset_store_path)
presets = PresetStore(store)

# Initialize session state
if 'history' not in st.session_state:
    st.session_state.history = SelectionHistory(TraitSelection())
if 'auth' not in st.session_state and config.auth_configured:
    auth = AuthContext(SupabaseAuthProvider(config.supabase_url, config.supabase_anon_key), store)
    auth.restore_session()
    st.session_state.auth = auth

history = st.session_state.history
selection = history.current


def set_selection(new_selection):
    if new_selection != history.current:
        history.push(new_selection)


# ===== SIDEBAR =====

st.sidebar.header("↩️ History")
undo_col, redo_col = st.sidebar.columns(2)
with undo_col:
    if st.button("Undo", disabled=not history.can_undo, use_container_width=True):
        history.undo()
        st.rerun()
with redo_col:
    if st.button("Redo", disabled=not history.can_redo, use_container_width=True):
        history.redo()
        st.rerun()

st.sidebar.header("💾 Presets")
preset_name = st.sidebar.text_input("Preset name", placeholder="e.g., Swamp Stalker")
if st.sidebar.button("Save current traits", disabled=not preset_name.strip() or not selection):
    saved = presets.save(preset_name, PresetSnapshot(traits=selection))
    st.sidebar.success(f"✅ Saved '{saved.name}'")

for preset in presets.list():
    load_col, delete_col = st.sidebar.columns([3, 1])
    with load_col:
        if st.button(f"📂 {preset.name}", key=f"load-{preset.id}", use_container_width=True):
            known = [t for t in preset.snapshot.traits if t in catalog]
            set_selection(TraitSelection(tuple(known)))
            st.rerun()
    with delete_col:
        if st.button("🗑️", key=f"delete-{preset.id}"):
            presets.delete(preset.id)
            st.rerun()

if 'auth' in st.session_state:
    auth = st.session_state.auth
    st.sidebar.header("🔐 Account")
    if auth.user:
        st.sidebar.info(f"Signed in as {auth.user.email}")
        if st.sidebar.button("Sign out"):
            auth.sign_out()
            st.rerun()
    else:
        email = st.sidebar.text_input("Email")
        password = st.sidebar.text_input("Password", type="password")
        if st.sidebar.button("Sign in", disabled=not (email and password)):
            result = auth.sign_in(email, password)
            if result.ok:
                st.rerun()
            else:
                st.sidebar.error(f"❌ {result.error.message}")

if config.show_debug_info:
    with st.sidebar.expander("⚙️ Settings"):
        st.write(f"**Image provider:** {config.image_provider} ({config.default_model})")
        st.write(f"**API key configured:** {'yes' if config.has_api_key else 'no (free tier)'}")
        st.write(f"**Image generation:** {'on' if config.enable_image_generation else 'off'}, "
                 f"batch size up to {config.max_batch_size}")
        st.write(f"**Catalog:** {config.trait_catalog_file or 'built-in'} ({len(catalog)} traits)")
        if catalog.dangling_references:
            st.write(f"**Unresolved references:** {len(catalog.dangling_references)}")


# ===== MAIN PAGE =====

st.title("🦖 Createosaur Trait Builder")

names = {d.id: d.name for d in catalog}
chosen = st.multiselect(
    "Traits",
    options=list(catalog.ids()),
    default=list(selection),
    format_func=lambda trait_id: names[trait_id],
    help="Pick traits for your creature; conflicting choices are flagged below"
)
if tuple(chosen) != tuple(selection):
    set_selection(TraitSelection(tuple(chosen)))
    st.rerun()

excluded = st.multiselect(
    "Never suggest",
    options=list(catalog.ids()),
    format_func=lambda trait_id: names[trait_id],
    key="excluded_traits",
    help="Traits you have ruled out; they are left out of the suggestions"
)

report = evaluate_selection(catalog, selection, max_suggestions=10, excluded=excluded)

col1, col2, col3 = st.columns(3)
with col1:
    st.metric("Selected Traits", len(selection))
with col2:
    st.metric("Conflicts", len(report.conflicts))
with col3:
    st.metric("Top Suggestion", names[report.suggestions[0].trait] if report.suggestions else "-")

if report.valid:
    st.success(report.get_summary())
else:
    st.error(report.get_summary())
    for conflict in report.conflicts:
        st.error(f"**CONFLICT**: {conflict.reason}")

# ===== SELECTION BREAKDOWN =====
st.markdown("### 🧬 Selection by Category")
grouped = group_by_category(catalog, selection)
category_cols = st.columns(len(grouped))
for col, (category, trait_ids) in zip(category_cols, grouped.items()):
    with col:
        st.markdown(f"**{TRAIT_CATEGORY_INFO[category]['name']}**")
        for trait_id in trait_ids:
            st.markdown(f"- {names[trait_id]}")

# ===== SUGGESTIONS =====
st.markdown("### 💡 Suggested Traits")
if report.suggestions:
    suggestion_df = pd.DataFrame([
        {
            'Trait': names[s.trait],
            'Confidence': s.confidence,
            'Rarity': catalog.get(s.trait).rarity.value,
            'Why': s.reason,
        }
        for s in report.suggestions
    ])

    fig_suggestions = px.bar(
        suggestion_df,
        x='Confidence',
        y='Trait',
        color='Rarity',
        orientation='h',
        range_x=[0, 1],
        title="Suggestion Confidence",
    )
    fig_suggestions.update_layout(
        yaxis=dict(autorange='reversed'),
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
    )
    st.plotly_chart(fig_suggestions, use_container_width=True)
    st.dataframe(suggestion_df, hide_index=True, use_container_width=True)

    add_choice = st.selectbox(
        "Add a suggested trait",
        options=[s.trait for s in report.suggestions],
        format_func=lambda trait_id: names[trait_id],
    )
    if st.button("➕ Add trait"):
        set_selection(selection.add(add_choice))
        st.rerun()
else:
    st.info("No compatible traits left to suggest")

# ===== CANDIDATE CHECK =====
with st.expander("🔍 Check a trait before adding it"):
    candidate = st.selectbox(
        "Candidate",
        options=[t for t in catalog.ids() if t not in selection],
        format_func=lambda trait_id: names[trait_id],
    )
    if candidate:
        result = check_candidate(catalog, selection, candidate)
        if result.compatible:
            st.success(f"✅ {names[candidate]} fits the current selection")
        else:
            for conflict in result.conflicts:
                st.warning(conflict.reason)

# ===== SPECIES LOOKUP =====
with st.expander("📚 Look up a species"):
    species_query = st.text_input("Species name", placeholder="e.g., Allosaurus")
    if species_query.strip():
        with st.spinner("Searching..."):
            results = WebSearch(endpoint=config.search_endpoint).query(species_query)
        if not results:
            st.info("No results found")
        for result in results:
            st.markdown(f"**[{result.title}]({result.url})**")
            st.write(result.text)
        hints = traits_mentioned(catalog, results)
        if hints:
            st.markdown("Traits mentioned: " + ", ".join(names[t] for t in hints))

# ===== CATALOG =====
with st.expander("📖 Trait Catalog"):
    catalog_df = pd.DataFrame([d.to_dict() for d in catalog])
    rarity_counts = catalog_df.groupby('rarity').size().reset_index(name='count')
    fig_rarity = px.pie(rarity_counts, names='rarity', values='count', title="Rarity Mix", hole=0.4)
    st.plotly_chart(fig_rarity, use_container_width=True)
    st.dataframe(
        catalog_df[['id', 'name', 'category', 'rarity', 'description']],
        hide_index=True,
        use_container_width=True
    )
