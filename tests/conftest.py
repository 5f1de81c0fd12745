import pytest

from database.db_manager import DatabaseManager
from database.goal_dao import GoalDAO
from database.recurring_expense_dao import RecurringExpenseDAO
from database.recurring_income_dao import RecurringIncomeDAO
from database.transaction_dao import TransactionDAO
from services.goal_service import GoalService
from services.recurring_expense_service import RecurringExpenseService
from services.recurring_income_service import RecurringIncomeService
from services.recurring_overview_service import RecurringOverviewService
from services.reminder_service import ReminderService


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "test.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def goal_service(db):
    return GoalService(GoalDAO(db))


@pytest.fixture
def expense_service(db, tx_dao):
    return RecurringExpenseService(RecurringExpenseDAO(db), tx_dao)


@pytest.fixture
def income_service(db, tx_dao, goal_service):
    return RecurringIncomeService(RecurringIncomeDAO(db), tx_dao, goal_service)


@pytest.fixture
def overview_service(expense_service, income_service):
    return RecurringOverviewService(expense_service, income_service)


@pytest.fixture
def reminder_service(overview_service):
    return ReminderService(overview_service)
