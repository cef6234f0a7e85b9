import json
import os
import tempfile
import unittest

from qualtrics import localized_text
from qualtrics import qsf


class LoadQsfTest(unittest.TestCase):

  def setUp(self):
    self.directory = tempfile.TemporaryDirectory()
    self.addCleanup(self.directory.cleanup)
    self.path = os.path.join(self.directory.name, 'survey.qsf')

  def test_load_valid_file(self):
    document = {
        'SurveyEntry': {'SurveyName': 'Survey', 'SurveyLanguage': 'EN'},
        'SurveyElements': [],
    }
    with open(self.path, 'w', encoding='utf-8') as qsf_file:
      json.dump(document, qsf_file)
    self.assertEqual(qsf.load_qsf(self.path), document)

  def test_load_invalid_json(self):
    with open(self.path, 'w', encoding='utf-8') as qsf_file:
      qsf_file.write('{not json')
    with self.assertRaises(qsf.QsfFormatError):
      qsf.load_qsf(self.path)


class ValidateQsfTest(unittest.TestCase):

  def test_rejects_malformed_documents(self):
    """Tests each shape check of the validator."""
    malformed = [
        [],
        {'SurveyElements': []},
        {'SurveyEntry': {'SurveyName': 'x'}, 'SurveyElements': []},
        {'SurveyEntry': {'SurveyLanguage': 'EN'}},
        {'SurveyEntry': {'SurveyLanguage': 'EN'}, 'SurveyElements': ['SQ']},
        {
            'SurveyEntry': {'SurveyLanguage': 'EN'},
            'SurveyElements': [{'Element': 'SQ'}],
        },
    ]
    for document in malformed:
      with self.subTest(document=document):
        with self.assertRaises(qsf.QsfFormatError):
          qsf.validate_qsf(document)

  def test_non_question_elements_are_not_checked(self):
    qsf.validate_qsf({
        'SurveyEntry': {'SurveyLanguage': 'EN'},
        'SurveyElements': [{'Element': 'BL', 'Payload': []}],
    })


class OrderedEntriesTest(unittest.TestCase):

  def test_integer_ids_sort_numerically(self):
    payload = {
        'Choices': {
            '10': {'Display': 'j'},
            '3': {'Display': 'c'},
            '1': {'Display': 'a'},
        }
    }
    self.assertEqual(
        qsf.ordered_entries(payload, 'Choices'),
        [
            ('1', {'Display': 'a'}),
            ('3', {'Display': 'c'}),
            ('10', {'Display': 'j'}),
        ],
    )

  def test_other_ids_follow_in_file_order(self):
    """Tests that non-integer ids come after integer ids, unsorted."""
    payload = {
        'Choices': {
            'b': {'Display': 'b'},
            '3': {'Display': 'c'},
            '01': {'Display': 'zero one'},
            '1': {'Display': 'a'},
            'a': {'Display': 'a2'},
        }
    }
    self.assertEqual(
        [entry_id for entry_id, _ in qsf.ordered_entries(payload, 'Choices')],
        ['1', '3', 'b', '01', 'a'],
    )

  def test_is_integer_id(self):
    self.assertTrue(qsf.is_integer_id('0'))
    self.assertTrue(qsf.is_integer_id('42'))
    self.assertFalse(qsf.is_integer_id('01'))
    self.assertFalse(qsf.is_integer_id('-1'))
    self.assertFalse(qsf.is_integer_id('x1'))
    self.assertFalse(qsf.is_integer_id(str(qsf.MAX_INTEGER_ID)))

  def test_array_is_numbered(self):
    payload = {'Answers': [{'Display': 'a'}, {'Display': 'b'}]}
    self.assertEqual(
        qsf.ordered_entries(payload, 'Answers'),
        [('1', {'Display': 'a'}), ('2', {'Display': 'b'})],
    )

  def test_missing_field(self):
    self.assertEqual(qsf.ordered_entries({}, 'Choices'), [])

  def test_malformed_field(self):
    with self.assertRaises(qsf.QsfFormatError):
      qsf.ordered_entries({'QuestionID': 'QID1', 'Choices': 'a'}, 'Choices')

  def test_text_entry_flag(self):
    self.assertTrue(qsf.has_text_entry({'TextEntry': 'on'}))
    self.assertTrue(qsf.has_text_entry({'TextEntry': True}))
    self.assertFalse(qsf.has_text_entry({'TextEntry': 'off'}))
    self.assertFalse(qsf.has_text_entry({}))


class LocalizedTextTest(unittest.TestCase):

  def test_merge_prefers_later_entries(self):
    self.assertEqual(
        localized_text.merge_localized({'EN': 'a', 'TR': 'b'}, {'TR': 'c'}),
        {'EN': 'a', 'TR': 'c'},
    )

  def test_submit_label_in_translated_locale(self):
    label = localized_text.submit_label('FR-CA')
    self.assertEqual(label['FR-CA'], 'Envoyer')
    self.assertEqual(set(label), {'FR-CA', 'ES-ES', 'ES'})


if __name__ == '__main__':
  unittest.main()
