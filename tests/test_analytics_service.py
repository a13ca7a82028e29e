import csv
import io
from datetime import datetime, timedelta
from models.admin import db
from services import analytics_service
from utils.date_utils import utcnow
from utils.errors import ValidationFailed
from waitlist_testcase import WaitlistTestCase


class GrowthSeriesTest(WaitlistTestCase):

    def test_window_and_daily_counts(self):
        now = utcnow()
        two_days_ago = now - timedelta(days=2)
        self.add_entry('today1@example.com', created_at=now, is_verified=True)
        self.add_entry('today2@example.com', created_at=now)
        self.add_entry('recent@example.com', created_at=two_days_ago, is_verified=True)
        self.add_entry('old@example.com', created_at=now - timedelta(days=10))

        series = analytics_service.growth_series(7)

        self.assertEqual(series, [
            {'day': two_days_ago.date().isoformat(), 'count': 1, 'verified': 1},
            {'day': now.date().isoformat(), 'count': 2, 'verified': 1},
        ])

    def test_verified_reflects_current_status_on_creation_day(self):
        created = utcnow() - timedelta(days=3)
        entry = self.add_entry('late@example.com', created_at=created)
        entry.mark_verified()
        db.session.commit()

        series = analytics_service.growth_series(7)
        self.assertEqual(series, [{'day': created.date().isoformat(), 'count': 1, 'verified': 1}])

    def test_series_is_sparse(self):
        now = utcnow()
        self.add_entry('a@example.com', created_at=now - timedelta(days=5))
        self.add_entry('b@example.com', created_at=now)
        self.assertEqual(len(analytics_service.growth_series(7)), 2)

    def test_default_window(self):
        self.add_entry('a@example.com', created_at=utcnow() - timedelta(days=29))
        self.add_entry('b@example.com', created_at=utcnow() - timedelta(days=31))
        series = analytics_service.growth_series()
        self.assertEqual(sum(point['count'] for point in series), 1)

    def test_empty_store(self):
        self.assertEqual(analytics_service.growth_series(7), [])

    def test_rejects_bad_window(self):
        for bad in (0, -3, 'abc', '7.5', True, 1000000, '1000000'):
            with self.assertRaises(ValidationFailed):
                analytics_service.growth_series(bad)

    def test_empty_window_uses_default(self):
        self.add_entry('a@example.com', created_at=utcnow() - timedelta(days=29))
        self.assertEqual(len(analytics_service.growth_series('')), 1)

    def test_accepts_numeric_string(self):
        self.add_entry('a@example.com')
        self.assertEqual(len(analytics_service.growth_series('7')), 1)


class CategoryBreakdownTest(WaitlistTestCase):

    def setUp(self):
        super().setUp()
        self.add_entry('a@example.com', industry='finance', company_size='1-10', is_verified=True)
        self.add_entry('b@example.com', industry='finance', company_size='11-50')
        self.add_entry('c@example.com', industry='retail', company_size='11-50', is_verified=True)
        self.add_entry('d@example.com', industry='education', company_size='11-50')
        self.add_entry('e@example.com', industry='technology', company_size='1000+',
                       created_at=utcnow() - timedelta(days=400))

    def test_industry_sorted_by_count_then_value(self):
        self.assertEqual(analytics_service.category_breakdown('industry'), [
            {'value': 'finance', 'count': 2, 'verifiedCount': 1},
            {'value': 'education', 'count': 1, 'verifiedCount': 0},
            {'value': 'retail', 'count': 1, 'verifiedCount': 1},
            {'value': 'technology', 'count': 1, 'verifiedCount': 0},
        ])

    def test_company_size(self):
        breakdown = analytics_service.category_breakdown('companySize')
        self.assertEqual(breakdown[0], {'value': '11-50', 'count': 3, 'verifiedCount': 1})
        self.assertEqual([group['value'] for group in breakdown[1:]], ['1-10', '1000+'])

    def test_groups_cover_whole_history(self):
        for field in ('industry', 'companySize'):
            breakdown = analytics_service.category_breakdown(field)
            self.assertEqual(sum(group['count'] for group in breakdown), 5)
            for group in breakdown:
                self.assertLessEqual(group['verifiedCount'], group['count'])

    def test_unknown_field(self):
        with self.assertRaises(ValidationFailed):
            analytics_service.category_breakdown('role')


class PainPointKeywordsTest(WaitlistTestCase):

    def test_counts_and_filters(self):
        self.add_entry('a@example.com', pain_points='Screening resumes takes TIME and the screening is slow')
        self.add_entry('b@example.com', pain_points='Scheduling interviews; screening resumes; ATS sync.')
        self.add_entry('c@example.com', pain_points='Slow scheduling with our ATS')

        result = analytics_service.pain_point_keywords()

        self.assertEqual(result['totalEntries'], 3)
        self.assertEqual(result['topWords'], [
            {'word': 'screening', 'count': 3},
            {'word': 'resumes', 'count': 2},
            {'word': 'scheduling', 'count': 2},
            {'word': 'slow', 'count': 2},
            {'word': 'interviews', 'count': 1},
            {'word': 'sync', 'count': 1},
            {'word': 'takes', 'count': 1},
        ])
        words = {item['word'] for item in result['topWords']}
        self.assertTrue(words.isdisjoint(analytics_service.STOPWORDS))
        self.assertTrue(all(len(word) >= 4 for word in words))

    def test_limited_to_top_twenty(self):
        text = ' '.join(f'keyword{i:02d}' for i in range(30))
        self.add_entry('a@example.com', pain_points=text)
        result = analytics_service.pain_point_keywords()
        self.assertEqual(len(result['topWords']), 20)
        self.assertEqual(result['topWords'][0], {'word': 'keyword00', 'count': 1})

    def test_empty_store(self):
        self.assertEqual(analytics_service.pain_point_keywords(), {'totalEntries': 0, 'topWords': []})

    def test_tokenize_splits_on_non_alphanumerics(self):
        self.assertEqual(analytics_service.tokenize("Can't hire-fast, 24/7!"), ['can', 't', 'hire', 'fast', '24', '7'])


class ExportTest(WaitlistTestCase):

    def test_snapshot_rows(self):
        created = datetime(2026, 3, 1, 9, 30)
        self.add_entry('a@example.com', first_name='Ada', company='Engines, Ltd.',
                       pain_points='Says "too many" applicants', created_at=created,
                       verification_code='123456', verification_code_expires_at=created)
        self.add_entry('b@example.com', created_at=created + timedelta(hours=1), is_verified=True, newsletter=True)

        rows = analytics_service.export_snapshot()

        self.assertEqual(rows[0], [
            'First Name', 'Last Name', 'Email', 'Phone', 'Company', 'Role', 'Company Size',
            'Industry', 'Current Tools', 'Pain Points', 'How They Heard About Us',
            'Newsletter Subscribed', 'Verified', 'Registration Date',
        ])
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[1][2], 'a@example.com')
        self.assertEqual(rows[1][-3:], ['false', 'false', '2026-03-01T09:30:00'])
        self.assertEqual(rows[2][-3:-1], ['true', 'true'])
        self.assertNotIn('123456', str(rows))

    def test_csv_quoting(self):
        self.add_entry('a@example.com', company='Engines, Ltd.', pain_points='Says "too many" applicants')
        parsed = list(csv.reader(io.StringIO(analytics_service.export_csv())))
        self.assertEqual(parsed[1][4], 'Engines, Ltd.')
        self.assertEqual(parsed[1][9], 'Says "too many" applicants')

    def test_export_filename(self):
        self.assertEqual(
            analytics_service.export_filename(datetime(2026, 10, 18, 14, 5)),
            'waitlist-export-2026-10-18-14-05.csv',
        )


class DashboardTest(WaitlistTestCase):

    def test_dashboard_keys(self):
        self.add_entry('a@example.com')
        data = analytics_service.dashboard(7)
        self.assertEqual(set(data), {'growth', 'industry', 'companySize', 'painPoints'})
        self.assertEqual(data['painPoints']['totalEntries'], 1)
