# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Counts the questions of a Qualtrics survey file by question type and selector.

"""

import argparse
from typing import Any, Dict, Optional

import pandas as pd

from qualtrics import qsf as qsf_lib

STATISTICS_BUCKETS = (
    'totalQuestions',
    'textEntryQuestions',
    'textEntryQuestionsSingleLine',
    'textEntryQuestionsMultiLine',
    'textEntryQuestionsEssayTextbox',
    'multipleChoiceQuestions',
    'singleChoiceQuestions',
    'matrixLikertQuestions',
    'formQuestions',
    'NPSQuestions',
    'textBlockQuestions',
    'graphicalBlockQuestions',
    'multipleSelectBoxQuestions',
)

_MULTIPLE_CHOICE_BUCKETS = {
    'MAVR': 'multipleChoiceQuestions',
    'MACOL': 'multipleChoiceQuestions',
    'SAHR': 'singleChoiceQuestions',
    'SACOL': 'singleChoiceQuestions',
    'NPS': 'NPSQuestions',
    'MSB': 'multipleSelectBoxQuestions',
}

_TEXT_ENTRY_BUCKETS = {
    'FORM': 'formQuestions',
    'SL': 'textEntryQuestionsSingleLine',
    'ML': 'textEntryQuestionsMultiLine',
    'ESTB': 'textEntryQuestionsEssayTextbox',
}

_DESCRIPTIVE_BUCKETS = {
    'TB': 'textBlockQuestions',
    'GRB': 'graphicalBlockQuestions',
}


def question_bucket(question_type: str, selector: str) -> Optional[str]:
  """Returns the bucket a (type, selector) pair is counted in, if any."""
  if question_type == 'TE':
    # Text entry with an unknown selector still counts as text entry.
    return _TEXT_ENTRY_BUCKETS.get(selector, 'textEntryQuestions')
  if question_type == 'MC':
    return _MULTIPLE_CHOICE_BUCKETS.get(selector)
  if question_type == 'Matrix' and selector == 'Likert':
    return 'matrixLikertQuestions'
  if question_type == 'DB':
    return _DESCRIPTIVE_BUCKETS.get(selector)
  return None


def aggregate_statistics(qsf: Dict[str, Any]) -> Dict[str, int]:
  qsf_lib.validate_qsf(qsf)
  stats = {bucket: 0 for bucket in STATISTICS_BUCKETS}
  for payload in qsf_lib.questions(qsf):
    stats['totalQuestions'] += 1
    bucket = question_bucket(
        payload.get('QuestionType'), payload.get('Selector')
    )
    if bucket:
      stats[bucket] += 1
  return stats


def statistics_table(stats: Dict[str, int]) -> pd.DataFrame:
  """Returns the statistics as a two column table for display."""
  return pd.DataFrame(
      {'bucket': list(stats.keys()), 'count': list(stats.values())}
  )


def main():
  """Prints question statistics for a QSF export."""
  parser = argparse.ArgumentParser(
      description='Counts the questions of a Qualtrics QSF survey by type.'
  )
  parser.add_argument(
      '--input_qsf', required=True, help='Path to the input QSF file.'
  )
  args = parser.parse_args()

  stats = aggregate_statistics(qsf_lib.load_qsf(args.input_qsf))
  print(statistics_table(stats).to_string(index=False))


if __name__ == '__main__':
  main()
