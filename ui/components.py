from typing import Any, Dict, List

import pandas as pd
import streamlit as st


def metric_row(metrics: List[Dict[str, Any]]):
    cols = st.columns(len(metrics))
    for col, m in zip(cols, metrics):
        col.metric(m["label"], m["value"])


def render_table(title: str, data: List[Dict[str, Any]], columns: List[str], empty: str = "No records"):
    if title:
        st.markdown(f"**{title}**")
    if not data:
        st.info(empty)
        return
    df = pd.DataFrame(data)
    st.dataframe(df[columns], use_container_width=True, hide_index=True)


def recipe_group(group: Dict[str, Any]):
    """One category bucket of recipes with its rows."""
    recipes = group.get("recipes", [])
    with st.expander(f"{group['name']} ({len(recipes)})", expanded=True):
        rows = [
            {
                "Recipe": r["name"],
                "Product": r.get("product_name") or "-",
                "Variant": r.get("variant_name") or "Base",
                "Serving": r.get("serving_size") or "-",
                "Ingredients": r.get("items_count", 0),
            }
            for r in recipes
        ]
        render_table("", rows, ["Recipe", "Product", "Variant", "Serving", "Ingredients"])


def notification_badge(unread: int) -> str:
    return f"Notifications ({unread})" if unread else "Notifications"


def money(value: Any) -> str:
    if value is None:
        return "-"
    return f"{float(value):,.2f}"


def success(msg: str):
    st.success(msg)


def error(msg: str):
    st.error(msg)


def warning(msg: str):
    st.warning(msg)


def info(msg: str):
    st.info(msg)


def toast(msg: str):
    st.toast(msg)
