import uuid
from datetime import date

from django.test import TestCase

from contracts import services
from contracts.models import ContractRecord, long_date_pt_br

from .utils import QTD_SERVICE


class ContractRecordTests(TestCase):
    def test_long_date(self):
        self.assertEqual(long_date_pt_br(date(2026, 3, 7)), '7 de março de 2026')

    def test_defaults(self):
        record = ContractRecord.objects.create(razao_social='Loja')
        self.assertEqual(record.status, ContractRecord.STATUS_PENDING)
        self.assertEqual(record.contract_duration, '4')
        self.assertEqual(record.cidade_assinatura, 'Campo Grande/MS')
        self.assertRegex(record.data_assinatura, r'^\d{1,2} de \w+ de \d{4}$')
        self.assertNotEqual(record.access_key, record.id)

    def test_to_contract_data(self):
        record = ContractRecord.objects.create(
            razao_social='Loja',
            selected_services=[QTD_SERVICE],
            service_quantities={QTD_SERVICE: '3'},
        )
        data = record.to_contract_data()
        self.assertEqual(data.id, str(record.id))
        self.assertEqual(data.selected_services, (QTD_SERVICE,))
        self.assertEqual(data.service_lines(), [QTD_SERVICE.replace('[QTD]', '3')])


class LookupTests(TestCase):
    def setUp(self):
        self.record = ContractRecord.objects.create(razao_social='Loja')

    def test_find_by_access_key_then_id(self):
        self.assertEqual(services.find_by_key(self.record.access_key), self.record)
        self.assertEqual(services.find_by_key(str(self.record.id)), self.record)

    def test_find_unknown(self):
        self.assertIsNone(services.find_by_key(uuid.uuid4()))
        self.assertIsNone(services.find_by_key('123'))
        self.assertIsNone(services.find_by_key(None))

    def test_rejected_signing_does_not_touch_record(self):
        with self.assertRaises(services.SigningRejected):
            services.sign_contract(self.record.id, signature_data_url='', terms_accepted=True)
        with self.assertRaises(services.SigningRejected):
            services.sign_contract(self.record.id, signature_data_url=None, terms_accepted=False)
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, ContractRecord.STATUS_PENDING)
        self.assertFalse(self.record.audit_events.exists())
