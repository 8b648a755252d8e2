import io
from datetime import date

import pandas as pd
import pytest


@pytest.fixture
def saree_week(create_worker, create_product, record_loom):
    """One operator weaving two products over two days."""
    worker = create_worker(name='Ravi')
    saree = create_product(name='Saree', worker_salary=5)
    towel = create_product(name='Towel', worker_salary=2)
    record_loom(worker['id'], '2025-01-06', [(1, saree['id'], 10), (2, towel['id'], 0), (3, towel['id'], 4)])
    record_loom(worker['id'], '2025-01-07', [(1, saree['id'], 5)])
    return worker, saree, towel


def test_salary_report(client, saree_week):
    worker, saree, towel = saree_week

    response = client.get(f"/api/reports/salary/{worker['id']}")
    assert response.status_code == 200
    report = response.get_json()['data']

    assert report['mode'] == 'production'
    assert report['worker']['name'] == 'Ravi'
    assert report['dates'] == ['2025-01-06', '2025-01-07']
    assert report['total'] == 83
    assert report['total_rounded'] == 83

    saree_table, towel_table = report['products']
    assert saree_table['product_name'] == 'Saree'
    assert saree_table['column_totals'] == [15]
    assert saree_table['salary'] == 75
    assert towel_table['machines'] == [3]
    assert towel_table['salary'] == 8


def test_salary_report_range(client, saree_week):
    worker = saree_week[0]

    report = client.get(f"/api/reports/salary/{worker['id']}?from=2025-01-07&to=2025-01-07").get_json()['data']
    assert report['from'] == '2025-01-07'
    assert report['dates'] == ['2025-01-07']
    assert report['total'] == 25

    response = client.get(f"/api/reports/salary/{worker['id']}?from=2025-01-08&to=2025-01-07")
    assert response.status_code == 400
    assert response.get_json()['message'] == 'from must not be after to'


def test_salary_report_same_day_range_with_time(client, saree_week):
    worker = saree_week[0]

    response = client.get(f"/api/reports/salary/{worker['id']}?from=2025-01-06T08:00:00&to=2025-01-06")
    assert response.status_code == 200
    report = response.get_json()['data']
    assert report['from'] == report['to'] == '2025-01-06'
    assert report['dates'] == ['2025-01-06']
    assert report['total'] == 58


def test_deactivated_product_pays_nothing_by_default(client, saree_week):
    worker, saree, _towel = saree_week
    client.delete(f"/api/products/{saree['id']}")

    report = client.get(f"/api/reports/salary/{worker['id']}").get_json()['data']
    saree_table = report['products'][0]
    assert saree_table['is_active'] is False
    assert saree_table['column_totals'] == [15]
    assert saree_table['salary'] == 0
    assert report['total'] == 8


def test_deactivated_product_keeps_rate_when_configured(app_factory):
    client = app_factory(INACTIVE_PRODUCT_RATE='keep').test_client()
    worker = client.post('/api/workers', json={'name': 'Ravi', 'phone': '9876543210'}).get_json()['data']
    saree = client.post('/api/products', json={'name': 'Saree', 'worker_salary': 5}).get_json()['data']
    client.post('/api/powerloom-production', json={
        'loom_number': 1, 'date': '2025-01-06', 'worker_id': worker['id'],
        'machines': [{'index': 1, 'product_id': saree['id'], 'quantity': 10}]
    })
    client.delete(f"/api/products/{saree['id']}")

    report = client.get(f"/api/reports/salary/{worker['id']}").get_json()['data']
    assert report['total'] == 50


def test_unknown_rate_policy_is_rejected(app_factory):
    with pytest.raises(ValueError):
        app_factory(INACTIVE_PRODUCT_RATE='half')


def test_flat_salary_for_mechanic(client, create_worker):
    mechanic = create_worker(name='Mohan', role='Mechanic', fixed_salary=12000.5)

    report = client.get(f"/api/reports/salary/{mechanic['id']}").get_json()['data']
    assert report['mode'] == 'flat'
    assert report['products'] == []
    assert report['total'] == 12000.5
    assert report['total_rounded'] == 12001

    response = client.get(f"/api/reports/salary/{mechanic['id']}/export")
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Salary export is only available for loom operators'


def test_salary_report_for_missing_worker(client):
    response = client.get('/api/reports/salary/999')
    assert response.status_code == 404
    assert response.get_json()['error'] == 'Worker not found'


def test_csv_export_logs_the_export(client, saree_week):
    worker = saree_week[0]

    response = client.get(f"/api/reports/salary/{worker['id']}/export?format=csv")
    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    disposition = response.headers['Content-Disposition']
    assert f"loom-operator-Ravi-{date.today().isoformat()}.csv" in disposition

    text = response.get_data(as_text=True)
    assert 'Machine 1' in text
    assert 'Machine 3' in text
    assert 'Machine 2' not in text
    assert 'Salary' in text

    logs = client.get(f"/api/export-logs?workerId={worker['id']}").get_json()['data']
    assert len(logs) == 1
    assert logs[0]['salary'] == 83
    assert logs[0]['from_date'].startswith('2025-01-06')
    assert logs[0]['to_date'].startswith('2025-01-07')


def test_xlsx_export(client, saree_week):
    worker = saree_week[0]

    response = client.get(f"/api/reports/salary/{worker['id']}/export?format=xlsx")
    assert response.status_code == 200
    assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

    summary = pd.read_excel(io.BytesIO(response.data), sheet_name='Summary')
    assert list(summary.columns) == ['Worker', 'Total Salary']
    assert summary.iloc[0]['Worker'] == 'Ravi'
    assert summary.iloc[0]['Total Salary'] == 83


def test_export_without_production_uses_today(client, create_worker):
    worker = create_worker(name='Ravi')

    response = client.get(f"/api/reports/salary/{worker['id']}/export")
    assert response.status_code == 200

    log, = client.get('/api/export-logs').get_json()['data']
    assert log['salary'] == 0
    assert log['from_date'].startswith(date.today().isoformat())


def test_export_rejects_unknown_format(client, saree_week):
    worker = saree_week[0]

    response = client.get(f"/api/reports/salary/{worker['id']}/export?format=pdf")
    assert response.status_code == 400
    assert response.get_json()['message'] == 'format must be one of: csv, xlsx'
    assert client.get('/api/export-logs').get_json()['count'] == 0


def test_weekly_profit_report(client):
    client.put('/api/settings/revenue', json={'value': 1000})
    for day, amount in (('2024-12-23', 300), ('2024-12-30', 100), ('2025-01-06', 50)):
        client.post('/api/expenses', json={'expense_type': 'Utilities', 'amount': amount, 'date': day})

    report = client.get('/api/reports/weekly-profit').get_json()['data']
    assert report['total_revenue'] == 1000
    assert report['total_expenses'] == 450
    assert report['net_profit'] == 550
    assert report['profit_margin'] == 55
    assert [w['key'] for w in report['weeks']] == ['2024-W52', '2025-W1', '2025-W2']
    assert report['weeks'][-1]['revenue_share'] == 1000


def test_weekly_profit_without_revenue(client):
    client.post('/api/expenses', json={'expense_type': 'Utilities', 'amount': 40, 'date': '2025-01-06'})

    report = client.get('/api/reports/weekly-profit').get_json()['data']
    assert report['net_profit'] == -40
    assert report['profit_margin'] == 0
    assert report['weeks'][0]['profit'] == -40
