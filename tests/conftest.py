import pytest

from src.modules.reports.schemas import (
    FinancialReportFilters,
    ReportConfig,
    ReportData,
)


@pytest.fixture
def report_data() -> ReportData:
    """
    Term 1 / 2024 records as the API returns them (camelCase keys).

    Student 99 does not exist, payment 8 has no student, expense category 99 does not exist.
    """
    return ReportData(
        students=[
            {"id": 1, "name": "Alice Nambi", "classLevel": "P.5"},
            {"id": 2, "name": "Brian Okello", "classLevel": "P.6"},
            {"id": 3, "name": "Carol Achieng", "classLevel": "P.5"},
        ],
        categories=[
            {"id": 10, "name": "Utilities"},
            {"id": 11, "name": "Stationery"},
        ],
        payments=[
            {"id": 1, "studentId": 1, "feeType": "Tuition", "term": 1, "year": 2024,
             "amountDue": 500000, "amountPaid": 500000, "paymentDate": "2024-02-01",
             "status": "paid", "paymentMethod": "Cash", "receiptNumber": "R-001"},
            {"id": 2, "studentId": 2, "feeType": "Tuition", "term": 1, "year": 2024,
             "amountDue": 300000, "amountPaid": 100000, "paymentDate": "2024-02-03",
             "status": "partial", "paymentMethod": "Mobile Money", "receiptNumber": None},
            {"id": 3, "studentId": 1, "feeType": "Boarding", "term": 1, "year": 2024,
             "amountDue": 200000, "amountPaid": 150000, "paymentDate": "2024-02-05"},
            {"id": 4, "studentId": 3, "feeType": "Tuition", "term": 1, "year": 2024,
             "amountDue": 500000, "amountPaid": 0, "paymentDate": "2024-02-06"},
            {"id": 5, "studentId": 2, "feeType": "Boarding", "term": 1, "year": 2024,
             "amountDue": 200000, "amountPaid": 250000, "paymentDate": "2024-02-07"},
            {"id": 6, "studentId": 1, "feeType": "Tuition", "term": 2, "year": 2024,
             "amountDue": 500000, "amountPaid": 500000, "paymentDate": "2024-05-02"},
            {"id": 7, "studentId": 99, "feeType": "Uniform", "term": 1, "year": 2024,
             "amountDue": 80000, "amountPaid": 30000, "paymentDate": "2024-02-09"},
            {"id": 8, "studentId": None, "feeType": "Uniform", "term": 1, "year": 2024,
             "amountDue": 50000, "amountPaid": None, "paymentDate": "2024-02-10"},
        ],
        expenses=[
            {"id": 1, "categoryId": 10, "amount": 120000, "description": "Electricity January",
             "expenseDate": "2024-01-15", "vendorName": "UMEME", "receiptNumber": "U-100"},
            {"id": 2, "categoryId": 11, "amount": 45000, "description": "Exercise books",
             "expenseDate": "2024-02-10"},
            {"id": 3, "categoryId": 10, "amount": 130000, "description": "Electricity March",
             "expenseDate": "2024-03-12", "vendorName": "UMEME"},
            {"id": 4, "categoryId": 99, "amount": 20000, "description": "Gate repair",
             "expenseDate": "2024-02-20"},
            {"id": 5, "categoryId": 11, "amount": 60000, "description": "Chalk",
             "expenseDate": "2023-12-30"},
            {"id": 6, "categoryId": None, "amount": None, "description": "Donation log",
             "expenseDate": "2024-04-01"},
        ],
    )


@pytest.fixture
def filters() -> FinancialReportFilters:
    return FinancialReportFilters(term=1, year=2024)


@pytest.fixture
def config() -> ReportConfig:
    return ReportConfig(
        school_name="Kampala Hill Primary School",
        address_box="P.O. Box 123, Kampala",
        contact_phones="0772 000000 / 0701 000000",
    )
