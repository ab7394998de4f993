"""
Streamlit Frontend for FinCorp Ledger

This is the screen back-office staff work in every day.

DESIGN PRINCIPLES:
1. Every number on screen is derived from the transaction log
2. Delete buttons only appear for people allowed to use them
3. Every delete asks for confirmation first
4. Administration lives in the sidebar, for administrators only

The UI holds no ledger logic. It reads from and calls into the
LedgerController kept in the session.
"""

import streamlit as st

from fincorp.config import get_settings, validate_all_settings
from fincorp.formatting import (
    format_currency,
    format_date,
    format_full_currency,
    parse_amount,
)
from fincorp.models.ledger import (
    AccountDraft,
    AccountType,
    AccountUpdate,
    Role,
    StaffDraft,
    TabMode,
    TransactionDraft,
    TransactionUpdate,
)
from fincorp.orchestrator import LedgerController, create_app_components
from fincorp.queries import describe_filter


# Page configuration
st.set_page_config(
    page_title="FinCorp Ledger",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

TAB_LABELS = {
    TabMode.RECENT: "Recent",
    TabMode.ALL: "All",
    TabMode.ACCOUNTS: "Accounts",
    TabMode.LOGS: "Logs",
}


def get_controller() -> LedgerController:
    """Get or create this session's controller."""
    if "controller" not in st.session_state:
        st.session_state.controller = create_app_components()
    return st.session_state.controller


def main():
    """Main application entry point."""
    controller = get_controller()

    if controller.current_user is None:
        render_login_page(controller)
        return

    render_sidebar(controller)
    render_totals(controller)
    render_pending_deletion(controller)

    st.markdown("---")
    render_filters(controller)

    tab = controller.criteria.tab
    if tab == TabMode.ACCOUNTS:
        render_accounts_view(controller)
    elif tab == TabMode.LOGS:
        render_audit_log(controller)
    else:
        render_transactions(controller)


def render_login_page(controller: LedgerController):
    """Render the login form. The password is not checked."""
    st.title("📒 FinCorp")
    st.caption("Back-office ledger")

    with st.form("login"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in", type="primary")

    if submitted:
        result = controller.login(username, password)
        if result.success:
            st.rerun()
        else:
            st.error(result.error_message)


def render_sidebar(controller: LedgerController):
    """Current user, new transaction form and admin tools."""
    user = controller.current_user

    st.sidebar.title("📒 FinCorp")
    st.sidebar.markdown(f"**{user.name}**  \n{user.role.value}")
    if st.sidebar.button("Log out"):
        controller.logout()
        st.rerun()

    st.sidebar.markdown("---")
    with st.sidebar.expander("➕ New transaction"):
        render_transaction_form(controller)

    if controller.can_manage():
        with st.sidebar.expander("👥 Manage staff"):
            render_staff_admin(controller)
        with st.sidebar.expander("🏦 Manage accounts"):
            render_account_admin(controller)
        with st.sidebar.expander("⚙️ Settings status"):
            render_settings_status()


def render_transaction_form(controller: LedgerController):
    account_ids = [a.id for a in controller.accounts]
    with st.form("new_transaction", clear_on_submit=True):
        code = st.text_input("Transaction No.")
        customer_name = st.text_input("Customer")
        customer_user = st.text_input("Customer user")
        amount_text = st.text_input("Amount (negative for cash out)")
        account_id = st.selectbox("Account", account_ids) if account_ids else None
        description = st.text_area("Description")
        submitted = st.form_submit_button("Save")

    if submitted:
        trx = controller.create_transaction(
            TransactionDraft(
                code=code,
                customer_name=customer_name,
                customer_user=customer_user,
                amount=parse_amount(amount_text),
                description=description,
                account_id=account_id,
            )
        )
        if trx is not None:
            st.success(f"Saved {trx.code}")
            st.rerun()
        else:
            st.warning("Fill in every field with a valid amount.")


def render_staff_admin(controller: LedgerController):
    reserved = get_settings().ledger.reserved_admin_username
    with st.form("new_staff", clear_on_submit=True):
        name = st.text_input("Name")
        username = st.text_input("Username")
        role = st.selectbox("Role", list(Role), format_func=lambda r: r.value)
        if st.form_submit_button("Add staff"):
            if controller.add_staff(StaffDraft(name=name, username=username, role=role)):
                st.rerun()

    for member in controller.staff:
        col1, col2, col3 = st.columns([3, 2, 1])
        col1.markdown(f"{member.name}  \n@{member.username}")
        role = col2.selectbox(
            "Role",
            list(Role),
            index=list(Role).index(member.role),
            format_func=lambda r: r.value,
            key=f"role-{member.id}",
            label_visibility="collapsed",
        )
        if role != member.role:
            controller.update_staff_role(member.id, role)
            st.rerun()
        if member.username != reserved and col3.button("🗑", key=f"del-staff-{member.id}"):
            st.session_state.pending_intent = controller.request_staff_deletion(member.id)
            st.rerun()


def render_account_admin(controller: LedgerController):
    with st.form("new_account", clear_on_submit=True):
        account_id = st.text_input("Account ID")
        name = st.text_input("Name")
        account_type = st.selectbox("Type", list(AccountType), format_func=lambda t: t.value)
        if st.form_submit_button("Add account"):
            draft = AccountDraft(id=account_id, name=name, account_type=account_type)
            if controller.add_account(draft):
                st.rerun()

    accounts = controller.accounts
    if accounts:
        index = st.selectbox(
            "Edit account",
            range(len(accounts)),
            format_func=lambda i: f"{accounts[i].id} · {accounts[i].name}",
            key="edit-account-choice",
        )
        chosen = accounts[index]
        with st.form("edit_account"):
            new_name = st.text_input("Name", value=chosen.name, key=f"edit-account-name-{chosen.id}")
            new_type = st.selectbox(
                "Type",
                list(AccountType),
                index=list(AccountType).index(chosen.account_type),
                format_func=lambda t: t.value,
                key=f"edit-account-type-{chosen.id}",
            )
            if st.form_submit_button("Save account"):
                updated = controller.update_account(
                    chosen.id, AccountUpdate(name=new_name, account_type=new_type)
                )
                if updated is None:
                    st.warning("An account needs a name.")
                else:
                    st.rerun()

    for i, account in enumerate(accounts):
        col1, col2 = st.columns([4, 1])
        col1.markdown(f"**{account.id}** {account.name} ({account.account_type.value})")
        if col2.button("🗑", key=f"del-acc-{i}-{account.id}"):
            st.session_state.pending_intent = controller.request_account_deletion(account.id)
            st.rerun()


def render_settings_status():
    """Show which configuration sections loaded."""
    status = validate_all_settings()

    for name in ("storage", "ledger", "app"):
        if status.get(name):
            st.success(f"✅ {name.title()}")
        else:
            st.error(f"❌ {name.title()}: {status.get(f'{name}_error')}")


def render_pending_deletion(controller: LedgerController):
    """Second step of every delete: confirm or cancel."""
    intent = st.session_state.get("pending_intent")
    if intent is None:
        return

    st.warning(intent.prompt)
    col1, col2, _ = st.columns([1, 1, 4])
    if col1.button("Yes, delete", type="primary"):
        controller.confirm_deletion(intent.intent_id)
        st.session_state.pending_intent = None
        st.rerun()
    if col2.button("Cancel"):
        controller.cancel_deletion(intent.intent_id)
        st.session_state.pending_intent = None
        st.rerun()


def render_totals(controller: LedgerController):
    """Company-wide totals; these ignore every filter."""
    totals = controller.totals()

    col1, col2, col3 = st.columns(3)
    col1.metric("Total company balance", format_full_currency(totals.total_balance))
    col2.metric("Total income", f"+{format_full_currency(totals.total_income)}")
    col3.metric("Total expense", f"-{format_full_currency(totals.total_expense)}")


def render_filters(controller: LedgerController):
    criteria = controller.criteria

    col1, col2, col3, col4 = st.columns([3, 2, 2, 3])
    query = col1.text_input("Search transactions", value=criteria.search_query)
    start = col2.date_input("From", value=criteria.start_date)
    end = col3.date_input("To", value=criteria.end_date)
    tab = col4.radio(
        "View",
        list(TabMode),
        index=list(TabMode).index(criteria.tab),
        format_func=lambda t: TAB_LABELS[t],
        horizontal=True,
    )

    if query != criteria.search_query:
        controller.set_search(query)
    if (start, end) != (criteria.start_date, criteria.end_date):
        controller.set_date_range(start, end)
    if tab != criteria.tab:
        controller.set_tab(tab)
        st.rerun()

    if st.button("Reset view"):
        controller.reset_view()
        st.rerun()


def render_transactions(controller: LedgerController):
    """The filtered transaction table with per-row actions."""
    rows = controller.displayed_transactions()

    st.subheader(describe_filter(controller.criteria))

    report_col, _ = st.columns([1, 3])
    if report_col.button("⬇️ Prepare CSV report"):
        st.session_state.report = controller.export_report()
    report = st.session_state.get("report")
    if controller.report_is_current(report):
        report_col.download_button(
            "Download report",
            data=report.content,
            file_name=report.filename,
            mime="text/csv",
        )

    if not rows:
        st.info("No transactions match the current view.")
        return

    editing = st.session_state.get("editing_trx")

    for trx in rows:
        cols = st.columns([2, 2, 3, 2, 1, 2, 1, 1])
        cols[0].markdown(f"`{trx.code}`")
        cols[1].caption(format_date(trx.date))
        cols[2].markdown(f"{trx.customer_name}  \n@{trx.customer_user}")
        color = "red" if trx.amount < 0 else "green"
        cols[3].markdown(f":{color}[{format_currency(trx.amount)}]")
        # Orphaned references still show their id
        cols[4].caption(trx.account_id)
        cols[5].caption(trx.staff_name)
        if cols[6].button("✏️", key=f"edit-trx-{trx.id}"):
            st.session_state.editing_trx = trx.id
            st.rerun()
        if controller.can_delete(trx) and cols[7].button("🗑", key=f"del-trx-{trx.id}"):
            st.session_state.pending_intent = controller.request_transaction_deletion(trx.id)
            st.rerun()
        if editing == trx.id:
            render_transaction_editor(controller, trx)


def render_transaction_editor(controller: LedgerController, trx):
    """Edit form for one row. The date and balance snapshot stay fixed."""
    account_ids = [a.id for a in controller.accounts]
    if trx.account_id not in account_ids:
        account_ids.insert(0, trx.account_id)

    with st.form(f"edit-trx-form-{trx.id}"):
        code = st.text_input("Transaction No.", value=trx.code, key=f"edit-code-{trx.id}")
        customer_name = st.text_input("Customer", value=trx.customer_name, key=f"edit-customer-{trx.id}")
        customer_user = st.text_input(
            "Customer user", value=trx.customer_user, key=f"edit-user-{trx.id}"
        )
        amount_text = st.text_input("Amount", value=str(trx.amount), key=f"edit-amount-{trx.id}")
        account_id = st.selectbox(
            "Account",
            account_ids,
            index=account_ids.index(trx.account_id),
            key=f"edit-account-{trx.id}",
        )
        description = st.text_area("Description", value=trx.description, key=f"edit-desc-{trx.id}")
        col1, col2 = st.columns(2)
        saved = col1.form_submit_button("Save changes", type="primary")
        closed = col2.form_submit_button("Close")

    if closed:
        st.session_state.editing_trx = None
        st.rerun()
    if not saved:
        return

    amount = parse_amount(amount_text)
    if amount is None:
        st.warning("Enter a valid amount.")
        return

    updated = controller.update_transaction(
        trx.id,
        TransactionUpdate(
            code=code,
            customer_name=customer_name,
            customer_user=customer_user,
            amount=amount,
            description=description,
            account_id=account_id,
        ),
    )
    if updated is None:
        st.warning("Code, customer and customer user cannot be blank.")
        return
    st.session_state.editing_trx = None
    st.rerun()


def render_accounts_view(controller: LedgerController):
    """Account cards; choosing one scopes the transaction view to it."""
    balances = controller.account_balances()
    columns = st.columns(3)

    for i, item in enumerate(balances):
        with columns[i % 3]:
            st.caption(f"{item.account.id} · {item.account.account_type.value}")
            st.markdown(f"**{item.account.name}**")
            st.markdown(format_full_currency(item.balance))
            if st.button("View transactions", key=f"scope-{i}-{item.account.id}"):
                controller.select_account(item.account.id)
                st.rerun()


def render_audit_log(controller: LedgerController):
    st.subheader("Audit log & activity")

    entries = controller.audit_log
    if not entries:
        st.info("No activity recorded yet.")
        return

    for entry in entries:
        st.markdown(
            f"**{entry.user_name}** · `{entry.action.value}` · {format_date(entry.timestamp)}  \n"
            f"{entry.details}"
            + (f"  \nID: `{entry.target_id}`" if entry.target_id else "")
        )


if __name__ == "__main__":
    main()
