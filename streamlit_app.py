from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from modules.orders.notifications import OrderNotificationFeed
from ui import api_client as api
from ui import components as ui
from ui.texts_en import (
    APP_TITLE,
    BTN_CLEAR,
    BTN_CLONE,
    BTN_DELETE,
    BTN_DOWNLOAD_REPORT,
    BTN_MARK_ALL_READ,
    BTN_REFRESH,
    BTN_SAVE,
    ERR_NAME_REQUIRED,
    ERR_TARGET_REQUIRED,
    LBL_CATEGORY,
    LBL_DATE_FROM,
    LBL_DATE_TO,
    LBL_RECIPE_TARGET,
    LBL_SEARCH,
    MSG_DELETED,
    MSG_NEED_CATEGORY,
    MSG_NEW_ORDERS,
    MSG_NO_ITEMS,
    MSG_NO_TARGETS,
    MSG_NOT_FOUND,
    MSG_REPORT_FAILED,
    MSG_SAVED,
    PAGE_CATEGORIES,
    PAGE_EVENTS,
    PAGE_EXPENSES,
    PAGE_ORDERS,
    PAGE_PRODUCTS,
    PAGE_RECIPES,
    PAGE_REPORTS,
)

st.set_page_config(page_title=APP_TITLE, layout="wide")

NEXT_STATUS = {"pending": "processing", "processing": "completed"}
POLL_INTERVAL_SECONDS = 15


def load(path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    try:
        return api.get(path, params=params) or []
    except RuntimeError as exc:
        ui.error(str(exc))
        return []


def flash(message: str, kind: str = "success"):
    st.session_state["flash_message"] = message
    st.session_state["flash_type"] = kind


def search_filter(items: List[Dict[str, Any]], text: str, keys: List[str]) -> List[Dict[str, Any]]:
    if not text.strip():
        return items
    t = text.strip().lower()
    return [i for i in items if any(t in str(i.get(k, "")).lower() for k in keys)]


def item_rows_editor(key: str, columns: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Editable table for nested line items; blank rows are dropped."""
    edited = st.data_editor(
        pd.DataFrame([{name: default for name, default in columns.items()}]),
        num_rows="dynamic",
        use_container_width=True,
        hide_index=True,
        key=key,
    )
    first = next(iter(columns))
    return [row for row in edited.to_dict("records") if str(row.get(first) or "").strip()]


# --- Recipes ---------------------------------------------------------------


def recipe_form(ingredients: List[Dict[str, Any]]):
    st.subheader("New recipe")
    targets = load("/portion-controls/targets")
    if not targets:
        ui.info(MSG_NO_TARGETS)
        return
    target_labels = {t["name"]: t for t in targets}
    label = st.selectbox(LBL_RECIPE_TARGET, ["-"] + list(target_labels), key="recipe_target")
    name = st.text_input("Recipe name", key="recipe_name")
    serving_size = st.text_input("Serving size", placeholder="1 cup", key="recipe_serving")
    description = st.text_area("Description", key="recipe_description")

    st.markdown("**Ingredients**")
    ingredient_ids = {p["name"]: p["id"] for p in ingredients}
    rows = item_rows_editor(
        "recipe_items_editor", {"ingredient_name": "", "quantity": 1.0, "unit": "pcs", "notes": ""}
    )

    if st.button(BTN_SAVE, type="primary", key="recipe_save"):
        if label == "-":
            ui.error(ERR_TARGET_REQUIRED)
            return
        if not name.strip():
            ui.error(ERR_NAME_REQUIRED)
            return
        if not rows:
            ui.error(MSG_NO_ITEMS)
            return
        target = target_labels[label]
        payload = {
            "product_id": target["product_id"],
            "variant_id": target["variant_id"],
            "name": name,
            "serving_size": serving_size or None,
            "description": description or None,
            "items": [
                {
                    "ingredient_product_id": ingredient_ids.get(row["ingredient_name"]),
                    "ingredient_name": row["ingredient_name"],
                    "quantity": float(row["quantity"]),
                    "unit": row.get("unit") or "pcs",
                    "notes": row.get("notes") or None,
                }
                for row in rows
            ],
        }
        try:
            api.post("/portion-controls", payload)
            flash(MSG_SAVED)
            st.rerun()
        except RuntimeError as exc:
            ui.error(str(exc))


def recipe_detail(recipe_id: int):
    try:
        recipe = api.get(f"/portion-controls/{recipe_id}")
    except RuntimeError:
        ui.warning(MSG_NOT_FOUND)
        return
    st.markdown(f"### {recipe['name']}")
    st.caption(f"{recipe.get('product_name')} / {recipe.get('variant_name') or 'Base'}")
    ui.render_table(
        "Ingredients", recipe.get("items", []), ["ingredient_name", "quantity", "unit", "notes"]
    )
    if st.button(BTN_DELETE, key=f"recipe_delete_{recipe_id}"):
        try:
            api.delete(f"/portion-controls/{recipe_id}")
            flash(MSG_DELETED)
            st.rerun()
        except RuntimeError as exc:
            ui.error(str(exc))


def recipes_tab(products: List[Dict[str, Any]]):
    st.header(PAGE_RECIPES)
    left, right = st.columns([3, 2])
    with left:
        groups = load("/portion-controls/by-category")
        if not groups:
            ui.info("No recipes yet.")
        for group in groups:
            ui.recipe_group(group)
        recipes = [r for g in groups for r in g["recipes"]]
        if recipes:
            labels = {f"{r['name']} (#{r['id']})": r["id"] for r in recipes}
            selected = st.selectbox("Recipe", list(labels), key="recipe_select")
            recipe_detail(labels[selected])
    with right:
        recipe_form(products)


# --- Categories & products -------------------------------------------------


def categories_tab(categories: List[Dict[str, Any]]):
    st.header(PAGE_CATEGORIES)
    ui.render_table("", categories, ["id", "name", "description", "is_active"])

    with st.form("category_form", clear_on_submit=True):
        name = st.text_input("Name")
        description = st.text_area("Description")
        if st.form_submit_button(BTN_SAVE):
            try:
                api.post("/categories", {"name": name, "description": description or None})
                flash(MSG_SAVED)
                st.rerun()
            except RuntimeError as exc:
                ui.error(str(exc))

    if categories:
        labels = {f"{c['name']} (#{c['id']})": c for c in categories}
        selected = labels[st.selectbox(LBL_CATEGORY, list(labels), key="category_select")]
        cols = st.columns(2)
        toggle_label = "Deactivate" if selected["is_active"] else "Activate"
        if cols[0].button(toggle_label, key="category_toggle"):
            try:
                api.patch(f"/categories/{selected['id']}/status", {"is_active": not selected["is_active"]})
                flash(MSG_SAVED)
                st.rerun()
            except RuntimeError as exc:
                ui.error(str(exc))
        if cols[1].button(BTN_DELETE, key="category_delete"):
            try:
                api.delete(f"/categories/{selected['id']}")
                flash(MSG_DELETED)
                st.rerun()
            except RuntimeError as exc:
                ui.error(str(exc))


def product_form(categories: List[Dict[str, Any]]):
    st.subheader("New product")
    active = [c for c in categories if c["is_active"]]
    if not active:
        ui.warning(MSG_NEED_CATEGORY)
        return
    category_ids = {c["name"]: c["id"] for c in active}
    name = st.text_input("Name", key="product_name")
    category = st.selectbox(LBL_CATEGORY, list(category_ids), key="product_category")
    cols = st.columns(3)
    price = cols[0].number_input("Price", min_value=0.0, value=0.0, key="product_price")
    stock = cols[1].number_input("Stock", min_value=0, value=0, key="product_stock")
    sku = cols[2].text_input("SKU", key="product_sku")
    description = st.text_area("Description", key="product_description")
    st.markdown("**Variants**")
    variants = item_rows_editor("product_variants_editor", {"name": "", "price": 0.0, "sku": ""})

    if st.button(BTN_SAVE, type="primary", key="product_save"):
        payload = {
            "name": name,
            "category_id": category_ids[category],
            "description": description or None,
            "sku": sku or None,
            "price": price or None,
            "stock": int(stock),
            "variants": [
                {"name": v["name"], "price": float(v["price"]) or None, "sku": v.get("sku") or None}
                for v in variants
            ],
        }
        try:
            api.post("/products", payload)
            flash(MSG_SAVED)
            st.rerun()
        except RuntimeError as exc:
            ui.error(str(exc))


def products_tab(categories: List[Dict[str, Any]], products: List[Dict[str, Any]]):
    st.header(PAGE_PRODUCTS)
    left, right = st.columns([3, 2])
    with left:
        search = st.text_input(LBL_SEARCH, key="products_search")
        filtered = search_filter(products, search, ["name", "category_name", "sku"])
        ui.render_table(
            "", filtered, ["id", "name", "category_name", "price", "stock", "variants_count", "is_active"]
        )
        if filtered:
            labels = {f"{p['name']} (#{p['id']})": p for p in filtered}
            product = labels[st.selectbox("Product", list(labels), key="product_select")]
            cols = st.columns(3)
            if cols[0].button(BTN_CLONE, key="product_clone"):
                try:
                    api.post(f"/products/{product['id']}/clone")
                    flash(MSG_SAVED)
                    st.rerun()
                except RuntimeError as exc:
                    ui.error(str(exc))
            if cols[1].button("Toggle active", key="product_toggle"):
                try:
                    api.patch(f"/products/{product['id']}/status", {"is_active": not product["is_active"]})
                    flash(MSG_SAVED)
                    st.rerun()
                except RuntimeError as exc:
                    ui.error(str(exc))
            if cols[2].button(BTN_DELETE, key="product_delete"):
                try:
                    api.delete(f"/products/{product['id']}")
                    flash(MSG_DELETED)
                    st.rerun()
                except RuntimeError as exc:
                    ui.error(str(exc))
    with right:
        product_form(categories)


# --- Orders ----------------------------------------------------------------


def notification_feed() -> OrderNotificationFeed:
    if "order_feed" not in st.session_state:
        st.session_state["order_feed"] = OrderNotificationFeed()
    return st.session_state["order_feed"]


def poll_new_orders(feed: OrderNotificationFeed):
    params = {"since": feed.last_seen} if feed.last_seen else None
    try:
        pending = api.get("/orders/pending", params=params) or []
    except RuntimeError as exc:
        ui.error(str(exc))
        return
    # Orders already waiting when the session starts are not news
    if not feed.subscribed:
        feed.subscribe(pending)
        return
    added = feed.sync(pending)
    if added:
        ui.toast(MSG_NEW_ORDERS.format(count=added))


@st.fragment(run_every=POLL_INTERVAL_SECONDS)
def order_watcher():
    feed = notification_feed()
    poll_new_orders(feed)
    st.caption(f"{ui.notification_badge(feed.unread_count)} · {datetime.now():%H:%M}")


def notifications_panel(feed: OrderNotificationFeed):
    st.subheader(ui.notification_badge(feed.unread_count))
    cols = st.columns(2)
    if cols[0].button(BTN_MARK_ALL_READ, key="feed_read_all"):
        feed.mark_all_as_read()
    if cols[1].button(BTN_CLEAR, key="feed_clear"):
        feed.clear()
    for n in feed.notifications:
        marker = "" if feed.is_read(n.id) else "**new** "
        row = st.columns([4, 1])
        row[0].markdown(f"{marker}Order #{n.id} from {n.customer_name}: {ui.money(n.total)}")
        if not feed.is_read(n.id) and row[1].button("Read", key=f"feed_read_{n.id}"):
            feed.mark_as_read(n.id)
            st.rerun()


def orders_tab():
    st.header(PAGE_ORDERS)
    feed = notification_feed()
    if st.button(BTN_REFRESH, key="orders_refresh"):
        poll_new_orders(feed)
    left, right = st.columns([3, 2])
    with left:
        queue = load("/orders/queue")
        if not queue:
            ui.info("The queue is empty.")
        for order in queue:
            with st.container(border=True):
                st.markdown(f"**#{order['id']} {order['customer_name']}** ({order['status']})")
                st.caption(f"{order.get('order_type') or '-'} · total {ui.money(order['total'])}")
                ui.render_table(
                    "", order["items"], ["product_name", "variant_name", "quantity", "subtotal"]
                )
                next_status = NEXT_STATUS.get(order["status"])
                if next_status and st.button(f"Mark {next_status}", key=f"order_next_{order['id']}"):
                    try:
                        api.patch(f"/orders/{order['id']}/status", {"status": next_status})
                        st.rerun()
                    except RuntimeError as exc:
                        ui.error(str(exc))
    with right:
        notifications_panel(feed)


# --- Events ----------------------------------------------------------------


def events_tab():
    st.header(PAGE_EVENTS)
    events = load("/events")
    ui.render_table("", events, ["id", "title", "slug", "event_date", "category", "pax", "location"])
    with st.form("event_form", clear_on_submit=True):
        cols = st.columns(2)
        title = cols[0].text_input("Title")
        slug = cols[1].text_input("Slug", placeholder="summer-wedding-2025")
        location = cols[0].text_input("Location")
        pax = cols[1].number_input("Pax", min_value=1, value=50)
        event_date = cols[0].date_input("Event date", value=date.today())
        category = cols[1].selectbox("Category", ["wedding", "corporate", "private"])
        description = st.text_area("Description")
        images = st.text_area("Image URLs (one per line)")
        flavors = st.text_input("Flavors (comma separated)")
        if st.form_submit_button(BTN_SAVE):
            payload = {
                "title": title,
                "slug": slug,
                "location": location,
                "pax": int(pax),
                "description": description,
                "images": images.splitlines(),
                "featured_image_index": 0,
                "event_date": event_date.isoformat(),
                "category": category,
                "flavors": flavors.split(","),
            }
            try:
                api.post("/events", payload)
                flash(MSG_SAVED)
                st.rerun()
            except RuntimeError as exc:
                ui.error(str(exc))


# --- Expenses --------------------------------------------------------------


def expenses_tab():
    st.header(PAGE_EXPENSES)
    cols = st.columns(2)
    date_from = cols[0].date_input(LBL_DATE_FROM, value=date.today() - timedelta(days=30), key="exp_from")
    date_to = cols[1].date_input(LBL_DATE_TO, value=date.today(), key="exp_to")
    expenses = load("/expenses", {"date_from": date_from.isoformat(), "date_to": date_to.isoformat()})
    ui.render_table("", expenses, ["id", "transaction_date", "items_count", "total_expense", "remarks"])

    st.subheader("New expense")
    transaction_date = st.date_input("Transaction date", value=date.today(), key="exp_date")
    remarks = st.text_input("Remarks", key="exp_remarks")
    items = item_rows_editor("expense_items_editor", {"item_name": "", "cost": 0.0})
    if st.button(BTN_SAVE, key="expense_save"):
        if not items:
            ui.error(MSG_NO_ITEMS)
            return
        payload = {
            "transaction_date": transaction_date.isoformat(),
            "remarks": remarks or None,
            "items": [{"item_name": i["item_name"], "cost": float(i["cost"])} for i in items],
        }
        try:
            api.post("/expenses", payload)
            flash(MSG_SAVED)
            st.rerun()
        except RuntimeError as exc:
            ui.error(str(exc))


# --- Reports ---------------------------------------------------------------


def reports_tab():
    st.header(PAGE_REPORTS)
    cols = st.columns(2)
    date_from = cols[0].date_input(LBL_DATE_FROM, value=date.today().replace(day=1), key="rep_from")
    date_to = cols[1].date_input(LBL_DATE_TO, value=date.today(), key="rep_to")
    params = {"date_from": date_from.isoformat(), "date_to": date_to.isoformat()}
    try:
        report = api.get("/reports/sales", params=params)
        top = api.get("/reports/top-products", params=params)
    except RuntimeError as exc:
        ui.error(str(exc))
        return

    ui.metric_row(
        [
            {"label": "Orders", "value": report["total_orders"]},
            {"label": "Gross", "value": ui.money(report["total_gross"])},
            {"label": "Expenses", "value": ui.money(report["total_expenses"])},
            {"label": "Net", "value": ui.money(report["total_net"])},
        ]
    )
    if report["daily_data"]:
        daily = pd.DataFrame(report["daily_data"]).set_index("date")
        st.bar_chart(daily[["total_gross", "total_expenses"]])
    ui.render_table(
        "Top products",
        top,
        ["product_name", "variant_name", "category_name", "total_quantity_sold", "total_revenue", "order_count"],
    )

    try:
        content = api.get_bytes("/reports/sales/excel", params=params)
    except RuntimeError:
        ui.warning(MSG_REPORT_FAILED)
        return
    st.download_button(
        label=BTN_DOWNLOAD_REPORT,
        data=content,
        file_name=f"sales_{params['date_from']}_{params['date_to']}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        key="sales_excel_download",
    )


def main():
    st.title(APP_TITLE)
    flash_msg = st.session_state.pop("flash_message", None)
    flash_type = st.session_state.pop("flash_type", None)
    if flash_msg:
        if flash_type == "success":
            ui.success(flash_msg)
        else:
            ui.info(flash_msg)

    order_watcher()

    categories = load("/categories")
    products = load("/products")

    tabs = st.tabs(
        [PAGE_RECIPES, PAGE_PRODUCTS, PAGE_CATEGORIES, PAGE_ORDERS, PAGE_EVENTS, PAGE_EXPENSES, PAGE_REPORTS]
    )
    with tabs[0]:
        recipes_tab(products)
    with tabs[1]:
        products_tab(categories, products)
    with tabs[2]:
        categories_tab(categories)
    with tabs[3]:
        orders_tab()
    with tabs[4]:
        events_tab()
    with tabs[5]:
        expenses_tab()
    with tabs[6]:
        reports_tab()


if __name__ == "__main__":
    main()
