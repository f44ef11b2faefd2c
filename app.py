# app.py
# =============================================================================
# Bread Calculator — baker's percentages, per-user recipes, AI import
# =============================================================================

import logging
from typing import Dict, Optional

import matplotlib.pyplot as plt  # dough composition pie chart
import streamlit as st
from babel.numbers import format_decimal

from auth import DEMO_USER, user_from_claims
from calc import (
    DEFAULT_DOUGH_WEIGHT,
    add_ingredient,
    compute_ingredient_grams,
    compute_total_dough_weight,
    duplicate_recipe,
    flour_percentage,
    flour_types,
    hydration,
    ingredient_breakdown,
    is_editable,
    recipe_from_draft,
    remove_ingredient,
    rescale_to_dough_weight,
    set_ingredient_name,
    set_ingredient_percentage,
    update_details,
)
from config import load_settings
from errors import BreadCalcError
from gemini_service import GeminiService
from models import INGREDIENT_NAMES, Recipe, User
from store import RecipeStore, new_recipe_id

# -----------------------------------------------------------------------------
# CONFIG
# -----------------------------------------------------------------------------
settings = load_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("breadcalc")

st.set_page_config(page_title="Bread Calculator", layout="wide")

PAGES = ["Recipe Library", "Recipe Editor", "Import Recipe (AI)", "Settings"]
LOCALES = ["en_US", "it_IT", "de_DE", "fr_FR"]

if "store" not in st.session_state:
    st.session_state.store = RecipeStore(settings.data_dir)
if "gemini" not in st.session_state:
    st.session_state.gemini = GeminiService.from_settings(settings) if settings.ai_enabled else None
if "locale" not in st.session_state:
    st.session_state["locale"] = "en_US"
if "serving_size_g" not in st.session_state:
    st.session_state.serving_size_g = 100.0
if "draft_rev" not in st.session_state:
    st.session_state.draft_rev = 0
if "nutrition" not in st.session_state:
    st.session_state.nutrition = {}

store: RecipeStore = st.session_state.store
gemini: Optional[GeminiService] = st.session_state.gemini

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------
def format_number(x, decimals: int = 1) -> str:
    """Format a number following the current locale."""
    locale = st.session_state.get("locale", "en_US")
    pattern = f"#,##0.{'0' * decimals}" if decimals > 0 else "#,##0"
    return format_decimal(x, format=pattern, locale=locale)


def format_grams(x: float, decimals: int = 1) -> str:
    return f"{format_number(x, decimals)} g"


def flash(kind: str, message: str) -> None:
    """Queue a message that survives the next rerun."""
    st.session_state["_flash"] = (kind, message)


def show_flash() -> None:
    pending = st.session_state.pop("_flash", None)
    if pending:
        kind, message = pending
        getattr(st, kind)(message)


def goto(page: str, recipe_id: Optional[str] = None) -> None:
    st.session_state["_goto"] = (page, recipe_id)


def current_user() -> Optional[User]:
    if settings.auth_enabled:
        if not st.user.is_logged_in:
            return None
        try:
            return user_from_claims(st.user.to_dict())
        except BreadCalcError as e:
            logger.warning("Identity rejected: %s", e.detail)
            st.error(str(e))
            return None
    return st.session_state.get("demo_user")


def load_recipes(user: Optional[User]):
    try:
        return store.list_recipes(user.id if user else None)
    except BreadCalcError as e:
        st.error(str(e))
        return store.standard


def recipe_label(r: Recipe) -> str:
    return f"{r.name} ({'standard' if r.is_standard else 'saved'})"


# Working copy of the recipe being edited. Every edit replaces it with a new
# value and bumps draft_rev so widgets re-read their values from it.
def open_draft(recipe: Recipe) -> None:
    ss = st.session_state
    if ss.get("draft_source") == recipe:
        return
    draft = rescale_to_dough_weight(recipe, DEFAULT_DOUGH_WEIGHT)
    ss.draft_source = recipe
    ss.draft = draft
    ss.draft_base = draft
    ss.draft_rev += 1


def _edit(op, *args) -> None:
    ss = st.session_state
    try:
        ss.draft = op(ss.draft, *args)
    except BreadCalcError as e:
        logger.warning("Edit rejected: %s", e.detail)
        flash("error", str(e))
    ss.draft_rev += 1


def _edit_from_widget(op, key: str, *args) -> None:
    _edit(op, *args, st.session_state[key])


def _demo_login() -> None:
    st.session_state.demo_user = DEMO_USER


def _demo_logout() -> None:
    st.session_state.demo_user = None


# -----------------------------------------------------------------------------
# HEADER / AUTH
# -----------------------------------------------------------------------------
if "_goto" in st.session_state:
    page_target, rid_target = st.session_state.pop("_goto")
    st.session_state.nav = page_target
    if rid_target:
        st.session_state.editor_recipe = rid_target

user = current_user()
recipes = load_recipes(user)
by_id: Dict[str, Recipe] = {r.id: r for r in recipes}

st.title("Bread Calculator 🍞")
with st.sidebar:
    if user:
        if user.picture:
            st.image(user.picture, width=48)
        st.markdown(f"**{user.name or user.id}**  \n{user.email}")
        if settings.auth_enabled:
            st.button("Logout", key="logout_btn", on_click=st.logout)
        else:
            st.button("Logout", key="demo_logout", on_click=_demo_logout)
    elif settings.auth_enabled:
        st.button("Sign in", key="login_btn", on_click=st.login, args=(settings.auth_provider,))
    else:
        st.caption("Running in demo mode — no identity provider configured.")
        st.button("Sign in as demo user", key="demo_login", on_click=_demo_login)

page = st.sidebar.selectbox("Navigate", PAGES, key="nav")
show_flash()

# -----------------------------------------------------------------------------
# LIBRARY
# -----------------------------------------------------------------------------
if page == "Recipe Library":
    st.header("Recipe Library")
    if not user:
        st.info("Welcome, Guest! Please sign in to save your own recipes or import new ones.")

    for r in recipes:
        c1, c2, c3, c4 = st.columns([3, 2, 1, 1])
        badge = "STANDARD" if r.is_standard else "SAVED"
        c1.markdown(f"**{r.name}** `{badge}`")
        c2.write(f"Flour: {' / '.join(flour_types(r)) or 'N/A'}")
        c3.write(f"Hydration: {format_number(hydration(r), 0)}%")
        c4.button("Open", key=f"open_{r.id}", on_click=goto, args=("Recipe Editor", r.id))

    if user:
        st.button("+ Import Recipe (AI)", key="lib_import", on_click=goto, args=("Import Recipe (AI)",))

# -----------------------------------------------------------------------------
# EDITOR
# -----------------------------------------------------------------------------
if page == "Recipe Editor":
    st.header("Recipe Editor")
    if st.session_state.get("editor_recipe") not in by_id:
        st.session_state.pop("editor_recipe", None)
    rid = st.selectbox(
        "Select recipe",
        list(by_id),
        format_func=lambda i: recipe_label(by_id[i]),
        key="editor_recipe",
    )
    recipe = by_id[rid]
    open_draft(recipe)
    draft: Recipe = st.session_state.draft
    editable = is_editable(recipe)
    k = f"{rid}_{st.session_state.draft_rev}"
    dough = compute_total_dough_weight(draft)

    colA, colB = st.columns([3, 2])
    with colA:
        if editable:
            st.text_input(
                "Recipe name", value=draft.name, key=f"name_{k}",
                on_change=_edit_from_widget, args=(update_details, f"name_{k}"),
            )
            st.text_area(
                "Description", value=draft.description, key=f"desc_{k}", height=80,
                on_change=_edit_from_widget, args=(update_details, f"desc_{k}", None),
            )
            st.number_input(
                "Total dough weight (g)", min_value=0.0, value=float(round(dough)), step=10.0,
                key=f"dough_{k}", on_change=_edit_from_widget, args=(rescale_to_dough_weight, f"dough_{k}"),
            )
        else:
            st.subheader(f"{draft.name} · STANDARD")
            st.write(draft.description)
            st.metric("Total dough weight", format_grams(dough, 0))
        st.caption(
            f"Total flour: {format_grams(draft.total_flour_grams)} · "
            f"Flour sum: {format_number(flour_percentage(draft))}%"
        )

        st.markdown("#### Ingredients 🧾")
        if editable:
            for i, ing in enumerate(draft.ingredients):
                c1, c2, c3, c4 = st.columns([3, 2, 2, 1])
                c1.selectbox(
                    "Ingredient", INGREDIENT_NAMES, index=INGREDIENT_NAMES.index(ing.name),
                    key=f"ing_{k}_{i}", label_visibility="collapsed",
                    on_change=_edit_from_widget, args=(set_ingredient_name, f"ing_{k}_{i}", i),
                )
                c2.number_input(
                    "Baker's %", min_value=0.0, value=ing.percentage, step=0.5, format="%.1f",
                    key=f"pct_{k}_{i}", label_visibility="collapsed",
                    on_change=_edit_from_widget, args=(set_ingredient_percentage, f"pct_{k}_{i}", i),
                )
                c3.write(format_grams(compute_ingredient_grams(draft, ing)))
                c4.button("Remove", key=f"rm_{k}_{i}", on_click=_edit, args=(remove_ingredient, i))

            a1, a2 = st.columns([3, 1])
            a1.selectbox("Add ingredient", INGREDIENT_NAMES, key="add_ingredient_name")
            a2.button(
                "+ Add", key=f"add_{k}",
                on_click=_edit_from_widget, args=(add_ingredient, "add_ingredient_name"),
            )
        else:
            st.table([
                {"Ingredient": ing.name, "Baker's %": format_number(ing.percentage),
                 "Weight (g)": format_number(compute_ingredient_grams(draft, ing))}
                for ing in draft.ingredients
            ])

    with colB:
        st.markdown("#### Dough composition 📊")
        labels, vals = zip(*ingredient_breakdown(draft)) if draft.ingredients else ((), ())
        if sum(vals) > 0:
            fig, ax = plt.subplots()
            ax.pie(vals, labels=labels, autopct='%1.1f%%', startangle=90)
            ax.axis('equal')
            st.pyplot(fig)
            plt.close(fig)
        else:
            st.info("Add ingredients with a percentage to see the dough composition.")

    st.divider()

    b1, b2, b3 = st.columns(3)
    with b1:
        if editable:
            changed = draft != st.session_state.draft_base
            if st.button("Save changes", key=f"save_{rid}", disabled=not changed):
                if user is None:
                    st.warning("Please log in to save changes.")
                else:
                    try:
                        store.save_recipe(user.id, draft)
                    except BreadCalcError as e:
                        st.error(str(e))
                    else:
                        st.session_state.draft_source = draft
                        st.session_state.draft_base = draft
                        flash("success", "Recipe saved!")
                        st.rerun()
    with b2:
        if editable and user:
            confirm = st.checkbox(f'Delete "{recipe.name}" (cannot be undone)', key=f"confirm_del_{rid}")
            if st.button("Delete 🗑️", key=f"del_{rid}", disabled=not confirm):
                try:
                    store.delete_recipe(user.id, rid)
                except BreadCalcError as e:
                    st.error(str(e))
                else:
                    st.session_state.nutrition.pop(rid, None)
                    flash("warning", "Recipe deleted")
                    goto("Recipe Library")
                    st.rerun()
    with b3:
        if user and st.button("Duplicate as my recipe", key=f"dup_{rid}"):
            copy = duplicate_recipe(draft, new_recipe_id())
            try:
                store.save_recipe(user.id, copy)
            except BreadCalcError as e:
                st.error(str(e))
            else:
                flash("success", f"Saved a copy: {copy.name}")
                goto("Recipe Editor", copy.id)
                st.rerun()

    st.markdown("#### Nutrition (AI) 🥗")
    serving = float(st.session_state.serving_size_g)
    if gemini is None:
        st.info("AI features are disabled. API key is missing.")
    elif st.button(f"Calculate nutrition per {format_number(serving, 0)} g", key=f"nutri_{rid}"):
        # Last response wins; earlier results for this recipe are replaced.
        with st.spinner("Calculating..."):
            try:
                st.session_state.nutrition[rid] = gemini.estimate_nutrition(draft, serving)
            except BreadCalcError as e:
                st.session_state.nutrition.pop(rid, None)
                st.error(f"Nutrition Error: {e}")
    info = st.session_state.nutrition.get(rid)
    if info:
        m = st.columns(5)
        m[0].metric("Calories", format_number(info.calories, 0))
        m[1].metric("Protein", format_grams(info.protein_grams))
        m[2].metric("Fat", format_grams(info.fat_grams))
        m[3].metric("Carbs", format_grams(info.carbohydrate_grams))
        m[4].metric("Fiber", format_grams(info.fiber_grams))

# -----------------------------------------------------------------------------
# IMPORT
# -----------------------------------------------------------------------------
if page == "Import Recipe (AI)":
    st.header("Import Recipe with AI")
    st.caption("Paste a bread recipe below, and the AI will convert it into the calculator format.")
    text = st.text_area(
        "Recipe text",
        height=260,
        key="import_text",
        placeholder="e.g., 900g Bread Flour, 100g Whole Wheat Flour, 750g Water, 200g Levain, 22g Salt...",
    )
    if st.button("Import Recipe", key="import_btn"):
        if user is None:
            st.warning("Please log in to import and save a new recipe.")
        elif gemini is None:
            st.error("AI features are disabled. API key is missing.")
        else:
            with st.spinner("Importing..."):
                try:
                    parsed = gemini.parse_recipe_from_text(text)
                    new_recipe = recipe_from_draft(parsed, new_recipe_id())
                    store.save_recipe(user.id, new_recipe)
                except BreadCalcError as e:
                    st.error(f"Error: {e}")
                else:
                    flash("success", f"Imported: {new_recipe.name}")
                    goto("Recipe Editor", new_recipe.id)
                    st.rerun()

# -----------------------------------------------------------------------------
# SETTINGS
# -----------------------------------------------------------------------------
if page == "Settings":
    st.header("Settings")

    st.subheader("Locale")
    loc = st.selectbox(
        "Interface locale", LOCALES,
        index=LOCALES.index(st.session_state["locale"]), key="settings_locale",
    )
    st.session_state["locale"] = loc

    st.subheader("Nutrition")
    st.session_state.serving_size_g = st.number_input(
        "Serving size (g)", min_value=1.0, value=float(st.session_state.serving_size_g),
        step=10.0, key="settings_serving",
    )
