import json
import logging
import re
from datetime import date

from stewardship_planner import config
from stewardship_planner.budget import summarize
from stewardship_planner.goals import goals_frame
from stewardship_planner.sample_data import load_sample_data, sample_bills, sample_settings
from stewardship_planner.storage import STORAGE_KEYS, StewardshipStore, generate_id


def test_empty_store(tmp_path):
    store = StewardshipStore(tmp_path / 'store.json')
    assert store.load_accounts() == []
    assert store.load_settings() is None
    assert store.snapshot()['goals'] == []


def test_default_path_comes_from_config(tmp_path, monkeypatch):
    path = tmp_path / 'configured.json'
    monkeypatch.setattr(config, 'STORE_PATH', path)
    assert StewardshipStore().path == path


def test_save_and_load_under_browser_keys(tmp_path):
    store = StewardshipStore(tmp_path / 'nested' / 'store.json')
    store.save_bills(sample_bills())
    store.save_settings(sample_settings(date(2024, 8, 1)))

    assert store.load_bills() == sample_bills()
    assert store.load_settings() == sample_settings(date(2024, 8, 1))

    raw = json.loads(store.path.read_text(encoding='utf-8'))
    assert set(raw) == {STORAGE_KEYS['bills'], STORAGE_KEYS['settings']}
    assert raw['expense-tracker-bills'][0]['dueDate'] == '2024-08-01'


def test_corrupt_file_is_treated_as_empty(tmp_path, caplog):
    path = tmp_path / 'store.json'
    path.write_text('{not json', encoding='utf-8')
    store = StewardshipStore(path)

    with caplog.at_level(logging.WARNING, logger='stewardship_planner.storage'):
        assert store.load_bills() == []
    assert 'Could not read data store' in caplog.text


def test_malformed_entries_are_skipped(tmp_path, caplog):
    path = tmp_path / 'store.json'
    good = sample_bills()[0].to_dict()
    bad = dict(good, id='bill_bad', frequency='fortnightly')
    path.write_text(json.dumps({STORAGE_KEYS['bills']: [good, bad, {'name': 'no id'}]}), encoding='utf-8')

    with caplog.at_level(logging.WARNING, logger='stewardship_planner.storage'):
        bills = StewardshipStore(path).load_bills()

    assert [bill.id for bill in bills] == ['bill_rent_001']
    assert caplog.text.count('Skipping malformed bills entry') == 2


def test_clear_removes_file(tmp_path):
    store = StewardshipStore(tmp_path / 'store.json')
    store.save_bills(sample_bills())
    store.clear()
    assert not store.path.exists()
    store.clear()


def test_sample_data_round_trips_through_store(tmp_path):
    store = StewardshipStore(tmp_path / 'store.json')
    load_sample_data(store, as_of=date(2024, 8, 1))
    snapshot = store.snapshot()

    assert len(snapshot['accounts']) == 10
    assert len(snapshot['debts']) == 2
    assert len(snapshot['goals']) == 4
    summary = summarize(snapshot['accounts'], snapshot['bills'], snapshot['settings'], as_of=date(2024, 8, 1))
    assert summary.total_income == 4500


def test_generate_id_format():
    first = generate_id('bill')
    assert re.fullmatch(r'bill_\d+_[a-z0-9]{9}', first)
    assert generate_id('bill') != first


def test_ensure_data_directories_creates_store_parent(tmp_path, monkeypatch):
    monkeypatch.setattr(config, 'DATA_DIR', tmp_path / 'data')
    monkeypatch.setattr(config, 'STORE_PATH', tmp_path / 'elsewhere' / 'store.json')
    config.ensure_data_directories()
    assert (tmp_path / 'data').is_dir()
    assert (tmp_path / 'elsewhere').is_dir()


def test_goal_without_target_date_is_skipped(tmp_path, caplog):
    path = tmp_path / 'store.json'
    dated = {'id': 'g0', 'targetAmount': 500, 'currentAmount': 0, 'targetDate': '2025-01-01'}
    undated = {'id': 'g1', 'targetAmount': 1000, 'currentAmount': 10, 'priority': 1}
    path.write_text(json.dumps({STORAGE_KEYS['goals']: [dated, undated]}), encoding='utf-8')

    with caplog.at_level(logging.WARNING, logger='stewardship_planner.storage'):
        goals = StewardshipStore(path).load_goals()

    assert [goal.id for goal in goals] == ['g0']
    assert "Skipping malformed goals entry" in caplog.text
    assert len(goals_frame(goals, date(2024, 1, 1))) == 1


def test_blank_pay_dates_do_not_break_saving(tmp_path):
    path = tmp_path / 'store.json'
    raw = {'paycheckAmount': 1500, 'payFrequency': 'bi-weekly', 'payDates': ['2024-08-01', '']}
    path.write_text(json.dumps({STORAGE_KEYS['settings']: raw}), encoding='utf-8')
    store = StewardshipStore(path)

    settings = store.load_settings()
    assert settings.pay_dates == (date(2024, 8, 1),)

    store.save_settings(settings)
    assert store.load_settings() == settings
