"""End-to-end tests for the command line interface."""

import pytest

from daybook.cli.main import cli


@pytest.fixture
def run(cli_runner, db_path):
    """Invoke the CLI against the temporary database as user alice."""

    def invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", db_path, "--user", "alice", *args], **kwargs)

    return invoke


@pytest.fixture
def ledger_cli(run):
    """Expenses/Rent and Income/Salary with one credit and one debit."""
    assert run("account", "main", "create", "Expenses").exit_code == 0
    assert run("account", "sub", "create", "Rent", "--main", "Expenses").exit_code == 0
    result = run(
        "add", "--main", "Income", "--sub", "Salary", "--type", "credit",
        "--amount", "1,000.00", "--date", "2024-01-05", "--description", "January salary",
        "--create-accounts",
    )
    assert result.exit_code == 0, result.output
    result = run(
        "add", "--main", "Expenses", "--sub", "Rent", "--type", "debit",
        "--amount", "500", "--date", "2024-01-10", "--description", "rent",
    )
    assert result.exit_code == 0, result.output
    return run


class TestAccounts:
    def test_create_and_list(self, run):
        result = run("account", "main", "create", "Expenses", "--description", "Outgoings")
        assert result.exit_code == 0
        assert "Created main account 'Expenses' (ID: 1)" in result.output

        result = run("account", "sub", "create", "Rent", "--main", "Expenses")
        assert result.exit_code == 0
        assert "under 'Expenses'" in result.output

        result = run("account", "main", "list")
        assert "Expenses" in result.output
        assert "Outgoings" in result.output
        assert "Rent" in result.output

        result = run("account", "sub", "list", "--main", "1")
        assert "Main: Expenses" in result.output

    def test_empty_name_rejected(self, run):
        result = run("account", "main", "create", "  ")
        assert result.exit_code == 1
        assert "name is required" in result.output

    def test_rename(self, run):
        run("account", "main", "create", "Expenses")
        result = run("account", "main", "rename", "Expenses", "Spending")
        assert result.exit_code == 0
        assert "Spending" in run("account", "main", "list").output

    def test_delete_blocked_by_sub_accounts(self, ledger_cli):
        result = ledger_cli("account", "main", "delete", "Expenses", "--yes")
        assert result.exit_code == 1
        assert "Cannot delete main account" in result.output
        assert "1 sub account" in result.output

    def test_delete_sub_blocked_by_transactions(self, ledger_cli):
        result = ledger_cli("account", "sub", "delete", "Rent", "--main", "Expenses", "--yes")
        assert result.exit_code == 1
        assert "1 transaction" in result.output

    def test_delete_unused_account(self, run):
        run("account", "main", "create", "Temp")
        result = run("account", "main", "delete", "Temp", "--yes")
        assert result.exit_code == 0
        assert "No main accounts found." in run("account", "main", "list").output

    def test_delete_cancelled(self, run):
        run("account", "main", "create", "Temp")
        result = run("account", "main", "delete", "Temp", input="n\n")
        assert "Deletion cancelled." in result.output
        assert "Temp" in run("account", "main", "list").output

    def test_unknown_account(self, run):
        result = run("account", "main", "delete", "Nope", "--yes")
        assert result.exit_code == 1
        assert "Main account 'Nope' not found" in result.output


class TestAdd:
    def test_add_creates_accounts_inline(self, run):
        result = run(
            "add", "--main", "Income", "--sub", "Salary", "--type", "credit",
            "--amount", "2500", "--date", "2024-03-01", "--create-accounts",
        )
        assert result.exit_code == 0, result.output
        assert "Created main account 'Income'" in result.output
        assert "Created sub account 'Salary'" in result.output
        assert "Created transaction 1" in result.output
        assert "Credit: 2,500.00" in result.output

    def test_unknown_account_without_create(self, run):
        result = run("add", "--main", "Nope", "--sub", "X", "--type", "debit", "--amount", "5")
        assert result.exit_code == 1
        assert "Main account 'Nope' not found" in result.output

    def test_invalid_amount(self, ledger_cli):
        result = ledger_cli("add", "--main", "Expenses", "--sub", "Rent", "--type", "debit", "--amount", "-5")
        assert result.exit_code == 1
        assert "Amount must be a positive number" in result.output

    def test_invalid_type(self, ledger_cli):
        result = ledger_cli("add", "--main", "Expenses", "--sub", "Rent", "--type", "transfer", "--amount", "5")
        assert result.exit_code == 2

    def test_sub_account_of_other_main(self, ledger_cli):
        result = ledger_cli("add", "--main", "Expenses", "--sub", "2", "--type", "debit", "--amount", "5")
        assert result.exit_code == 1
        assert "does not belong" in result.output


class TestTransactions:
    def test_list_with_running_balance(self, ledger_cli):
        result = ledger_cli("transaction", "list")
        assert result.exit_code == 0, result.output
        assert "Found 2 transaction(s)" in result.output
        assert "Expenses > Rent" in result.output
        assert "-500.00" in result.output
        assert "Total credit: 1,000.00" in result.output
        assert "Balance:      500.00" in result.output

    def test_list_filtered(self, ledger_cli):
        result = ledger_cli("transaction", "list", "--main", "Income")
        assert "Found 1 transaction(s)" in result.output
        assert "Balance:      1,000.00" in result.output

        result = ledger_cli("transaction", "list", "--start-date", "2025-01-01")
        assert "No transactions found." in result.output

    def test_list_search(self, ledger_cli):
        result = ledger_cli("transaction", "list", "--search", "RENT")
        assert result.exit_code == 0, result.output
        assert "Found 1 transaction(s)" in result.output
        assert "Total credit: 0.00" in result.output
        assert "Balance:      -500.00" in result.output

        result = ledger_cli("transaction", "list", "--search", "income")
        assert "January salary" in result.output

        result = ledger_cli("transaction", "list", "--search", "groceries")
        assert "No transactions found." in result.output

    def test_edit(self, ledger_cli):
        result = ledger_cli("transaction", "edit", "2", "--amount", "650", "--description", "rent + fees")
        assert result.exit_code == 0, result.output
        assert "Updated transaction 2" in result.output
        assert "rent + fees" in ledger_cli("transaction", "list").output

    def test_edit_nothing(self, ledger_cli):
        result = ledger_cli("transaction", "edit", "2")
        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_delete_and_undo(self, ledger_cli):
        result = ledger_cli("transaction", "delete", "2", "--yes")
        assert result.exit_code == 0, result.output
        assert "Deleted transaction 2" in result.output
        assert "Undo with: daybook transaction undo 2" in result.output
        assert "Found 1 transaction(s)" in ledger_cli("transaction", "list").output

        trash = ledger_cli("transaction", "trash")
        assert "rent" in trash.output
        assert "500.00" in trash.output

        result = ledger_cli("transaction", "undo", "2")
        assert result.exit_code == 0, result.output
        assert "Restored transaction 2" in result.output

        listing = ledger_cli("transaction", "list").output
        assert "Found 2 transaction(s)" in listing
        assert "Balance:      500.00" in listing
        assert "No deleted transactions." in ledger_cli("transaction", "trash").output

    def test_delete_missing(self, ledger_cli):
        result = ledger_cli("transaction", "delete", "99", "--yes")
        assert result.exit_code == 1
        assert "Transaction 99 not found" in result.output

    def test_undo_nothing(self, ledger_cli):
        result = ledger_cli("transaction", "undo", "1")
        assert result.exit_code == 1
        assert "No deleted transaction found" in result.output


class TestSummary:
    def test_totals(self, ledger_cli):
        result = ledger_cli("summary")
        assert result.exit_code == 0, result.output
        assert "Transactions: 2" in result.output
        assert "Total debit:  500.00" in result.output

    def test_by_month(self, ledger_cli):
        result = ledger_cli("summary", "--by", "monthly")
        assert "2024-01" in result.output

    def test_by_account(self, ledger_cli):
        result = ledger_cli("summary", "--by", "account")
        assert "Expenses" in result.output
        assert "Income" in result.output

    def test_period_conflicts_with_dates(self, ledger_cli):
        result = ledger_cli("summary", "--period", "this-month", "--start-date", "2024-01-01")
        assert result.exit_code == 1

    def test_dashboard(self, ledger_cli):
        result = ledger_cli("dashboard", "--months", "3")
        assert result.exit_code == 0, result.output
        assert "Last 3 months:" in result.output
        assert "By main account:" in result.output
        assert "January salary" in result.output
