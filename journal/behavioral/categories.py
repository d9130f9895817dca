"""
Category tables and scoring profiles for the text categorizer.

The categorizer is a single engine; energy and stress analysis differ only in
the profile passed to it. A profile names its category table and the modifier
weights applied on top of keyword hits.
"""
from typing import Tuple

from journal.domain import CategoryDefinition, ScoringProfile
from journal.utils.constants import FIELD_ENERGY, FIELD_STRESS


ENERGY_CATEGORIES: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        name='physical',
        keywords={'sleep', 'exercise', 'workout', 'walk', 'run', 'yoga', 'rest', 'nap',
                  'food', 'eat', 'coffee', 'tea', 'hydrat', 'vitamin', 'stretch'},
        boost_words={'good', 'great', 'excellent', 'quality', 'enough', 'proper',
                     'healthy', 'fresh', 'energizing'},
        drain_words={'poor', 'bad', 'lack', 'tired', 'exhausted', 'skip', 'miss', 'junk'},
        weight=1.2,
    ),
    CategoryDefinition(
        name='work',
        keywords={'project', 'meeting', 'collaboration', 'achievement', 'completed',
                  'success', 'accomplish', 'goal', 'task', 'progress', 'breakthrough', 'solve'},
        boost_words={'successful', 'productive', 'efficient', 'creative', 'focused',
                     'flow', 'inspired', 'motivated'},
        drain_words={'frustrating', 'difficult', 'blocked', 'stuck', 'overwhelming', 'stressful'},
        weight=1.0,
    ),
    CategoryDefinition(
        name='social',
        keywords={'family', 'friends', 'team', 'conversation', 'people', 'social',
                  'connection', 'relationship', 'support', 'laugh', 'fun'},
        boost_words={'positive', 'supportive', 'encouraging', 'inspiring', 'uplifting',
                     'connecting', 'bonding'},
        drain_words={'negative', 'draining', 'toxic', 'conflict', 'argument', 'disappointing'},
        weight=1.1,
    ),
    CategoryDefinition(
        name='mental',
        keywords={'learning', 'creative', 'focus', 'meditation', 'reading', 'music',
                  'think', 'idea', 'inspiration', 'clarity', 'mindful'},
        boost_words={'clear', 'sharp', 'creative', 'inspired', 'calm', 'peaceful',
                     'centered', 'balanced'},
        drain_words={'cloudy', 'scattered', 'overwhelmed', 'confused', 'distracted', 'restless'},
        weight=1.0,
    ),
    CategoryDefinition(
        name='environment',
        keywords={'nature', 'weather', 'home', 'office', 'quiet', 'space', 'clean',
                  'organized', 'beautiful', 'comfortable', 'fresh air'},
        boost_words={'peaceful', 'comfortable', 'organized', 'clean', 'bright',
                     'natural', 'serene'},
        drain_words={'messy', 'cluttered', 'noisy', 'dark', 'stuffy', 'uncomfortable', 'chaotic'},
        weight=0.8,
    ),
)


STRESS_CATEGORIES: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        name='work_pressure',
        keywords={'deadline', 'meeting', 'pressure', 'workload', 'boss', 'project',
                  'client', 'urgent', 'rush', 'overtime', 'demand'},
        intensity_words={'overwhelming', 'crushing', 'intense', 'extreme', 'unbearable',
                         'massive', 'huge'},
        trigger_words={'last minute', 'unexpected', 'changed', 'moved up', 'urgent', 'emergency'},
        weight=1.3,
    ),
    CategoryDefinition(
        name='technical',
        keywords={'technical', 'computer', 'software', 'bug', 'internet', 'technology',
                  'system', 'crash', 'error', 'problem'},
        intensity_words={'broken', 'failing', 'slow', 'frozen', 'crashed', 'corrupted'},
        trigger_words={'suddenly', 'without warning', 'stopped working', 'lost'},
        weight=1.1,
    ),
    CategoryDefinition(
        name='interruptions',
        keywords={'interruption', 'distraction', 'email', 'phone', 'noise', 'context',
                  'switching', 'multitask'},
        intensity_words={'constant', 'frequent', 'nonstop', 'endless', 'continuous'},
        trigger_words={'every few minutes', 'all day', 'back to back', 'no break'},
        weight=1.0,
    ),
    CategoryDefinition(
        name='personal',
        keywords={'family', 'relationship', 'health', 'money', 'financial', 'home',
                  'personal', 'life'},
        intensity_words={'serious', 'major', 'significant', 'important', 'critical'},
        trigger_words={'sudden', 'unexpected', 'emergency', 'crisis'},
        weight=1.2,
    ),
    CategoryDefinition(
        name='time',
        keywords={'time', 'rushing', 'late', 'schedule', 'traffic', 'waiting', 'delay', 'behind'},
        intensity_words={'very', 'extremely', 'badly', 'terribly'},
        trigger_words={'again', 'always', 'every time', 'as usual'},
        weight=0.9,
    ),
)


ENERGY_PROFILE = ScoringProfile(name=FIELD_ENERGY, categories=ENERGY_CATEGORIES)

STRESS_PROFILE = ScoringProfile(
    name=FIELD_STRESS,
    categories=STRESS_CATEGORIES,
    grades_intensity=True,
)

DEFAULT_PROFILES = {
    FIELD_ENERGY: ENERGY_PROFILE,
    FIELD_STRESS: STRESS_PROFILE,
}
