# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import Dict, List, Optional

from app.schemas.plan_schemas import (
    ActionCategory,
    ActionDifficulty,
    ActionTemplate,
    HabitAnchor,
    MetricTarget,
    TargetCondition,
)

LOW = TargetCondition.low
HIGH = TargetCondition.high
EASY = ActionDifficulty.easy
MEDIUM = ActionDifficulty.medium
HARD = ActionDifficulty.hard


def _template(id, title, description, category, duration, targets, focus, difficulty=EASY) -> ActionTemplate:
    return ActionTemplate(
        id=id,
        title=title,
        description=description,
        category=category,
        duration=duration,
        target_metrics=[MetricTarget(metric=m, condition=c, threshold=t) for m, c, t in targets],
        focus_modules=focus,
        difficulty=difficulty,
    )


COPING = ActionCategory.coping
LIFESTYLE = ActionCategory.lifestyle
CONNECTION = ActionCategory.connection

# 🌱 Seed catalogue loaded by reset_db.py
SEED_ACTION_TEMPLATES: List[ActionTemplate] = [
    # Coping
    _template("breathing-478", "4-7-8 Breathing Exercise", "Calming breath technique to reduce anxiety",
              COPING, 5, [("anxiety", HIGH, 6), ("stress", HIGH, 6)], ["stress_relief", "mindfulness"]),
    _template("breathing-box", "Box Breathing", "Breathe in, hold, out, hold for four counts each",
              COPING, 5, [("stress", HIGH, 6)], ["stress_relief"]),
    _template("grounding-54321", "5-4-3-2-1 Grounding", "Use your senses to anchor to the present",
              COPING, 5, [("anxiety", HIGH, 7)], ["mindfulness"]),
    _template("mindfulness-body-scan", "Body Scan Meditation", "Bring awareness to each part of your body",
              COPING, 15, [("stress", HIGH, 5), ("anxiety", HIGH, 5)], ["mindfulness"], MEDIUM),
    _template("mindfulness-5min", "5-Minute Meditation", "Quick mindfulness break",
              COPING, 5, [("focus", LOW, 5)], ["mindfulness"]),
    _template("journal-gratitude", "Gratitude Journal", "Write 3 things you're grateful for",
              COPING, 5, [("mood", LOW, 6)], ["gratitude"]),
    _template("cognitive-reframe", "Thought Reframing", "Challenge negative thoughts",
              COPING, 10, [("mood", LOW, 4)], ["emotional_processing"], MEDIUM),
    _template("compassion-letter", "Self-Compassion Letter", "Write a kind letter to yourself",
              COPING, 15, [("mood", LOW, 4)], ["self_compassion"], MEDIUM),
    _template("relaxation-pmr", "Progressive Muscle Relaxation", "Tense and release muscle groups",
              COPING, 15, [("stress", HIGH, 6)], ["stress_relief"]),

    # Lifestyle
    _template("lifestyle-walk-10", "Take a 10-Minute Walk", "Step outside for fresh air and movement",
              LIFESTYLE, 10, [("energy", LOW, 5), ("mood", LOW, 5)], ["physical_wellness"]),
    _template("lifestyle-stretch", "5-Minute Stretch Break", "Release tension in your body",
              LIFESTYLE, 5, [("energy", LOW, 5)], ["physical_wellness"]),
    _template("lifestyle-yoga", "Gentle Yoga Session", "Flow through calming poses",
              LIFESTYLE, 20, [("stress", HIGH, 5), ("energy", LOW, 4)], ["physical_wellness", "mindfulness"], MEDIUM),
    _template("lifestyle-workout", "Quick Home Workout", "15-minute bodyweight exercises",
              LIFESTYLE, 15, [("energy", LOW, 4)], ["physical_wellness"], MEDIUM),
    _template("lifestyle-sleep-routine", "Wind Down Routine", "Prepare your body for sleep",
              LIFESTYLE, 30, [("sleep", LOW, 5)], ["sleep_hygiene"]),
    _template("lifestyle-no-screens", "Screen-Free Hour", "Put devices away before bed",
              LIFESTYLE, 60, [("sleep", LOW, 5)], ["sleep_hygiene"], MEDIUM),
    _template("lifestyle-hydrate", "Drink a Glass of Water", "Stay hydrated for better mood",
              LIFESTYLE, 2, [("energy", LOW, 5)], ["physical_wellness"]),
    _template("lifestyle-meal-prep", "Prepare a Nutritious Meal", "Cook something healthy",
              LIFESTYLE, 30, [("energy", LOW, 4)], ["physical_wellness"], MEDIUM),
    _template("lifestyle-tidy", "Tidy Your Space", "Clean and organize your area",
              LIFESTYLE, 15, [("focus", LOW, 4), ("anxiety", HIGH, 6)], ["productivity"]),

    # Connection
    _template("connection-text-friend", "Send a Kind Message", "Reach out to someone you care about",
              CONNECTION, 5, [("mood", LOW, 5)], ["social_connection"]),
    _template("connection-call", "Call Someone", "Have a voice conversation",
              CONNECTION, 15, [("mood", LOW, 4)], ["social_connection"], MEDIUM),
    _template("connection-thank", "Express Gratitude", "Thank someone for something",
              CONNECTION, 5, [("mood", LOW, 5)], ["social_connection", "gratitude"]),
    _template("connection-compliment", "Give a Genuine Compliment", "Say something kind to someone",
              CONNECTION, 2, [("mood", LOW, 5)], ["social_connection"]),
    _template("connection-pet", "Spend Time with a Pet", "Connect with an animal",
              CONNECTION, 15, [("stress", HIGH, 5), ("mood", LOW, 5)], ["social_connection"]),
    _template("connection-deep-convo", "Have a Deep Conversation", "Talk about something meaningful",
              CONNECTION, 30, [("mood", LOW, 4)], ["social_connection"], MEDIUM),
    _template("connection-community", "Engage with Community", "Participate in a group activity",
              CONNECTION, 60, [("mood", LOW, 4)], ["social_connection"], HARD),
    _template("connection-boundary", "Set a Healthy Boundary", "Communicate a limit kindly",
              CONNECTION, 10, [("anxiety", HIGH, 6)], ["social_connection"], HARD),
]

# 🪶 One-minute versions handed out when a category keeps getting skipped
SIMPLIFIED_ACTIONS: Dict[ActionCategory, List[dict]] = {
    COPING: [
        {"id": "simple-coping-1", "title": "One Deep Breath",
         "description": "Take just one slow, deep breath. Inhale for 4 counts, exhale for 4 counts."},
        {"id": "simple-coping-2", "title": "Name 3 Things You See",
         "description": "Look around and name 3 things you can see right now."},
        {"id": "simple-coping-3", "title": "Shoulder Shrug",
         "description": "Raise your shoulders to your ears, hold for 3 seconds, then release."},
    ],
    LIFESTYLE: [
        {"id": "simple-lifestyle-1", "title": "Drink Some Water",
         "description": "Take a few sips of water right now."},
        {"id": "simple-lifestyle-2", "title": "Stand and Stretch",
         "description": "Stand up from where you are and stretch your arms overhead once."},
        {"id": "simple-lifestyle-3", "title": "Look Outside",
         "description": "Look out a window for 30 seconds. Notice what you see."},
    ],
    CONNECTION: [
        {"id": "simple-connection-1", "title": "Send an Emoji",
         "description": "Send a simple emoji to someone you care about. Just one is enough."},
        {"id": "simple-connection-2", "title": "Like a Post",
         "description": "Find one post from a friend or family member and react to it."},
        {"id": "simple-connection-3", "title": "Think of Someone",
         "description": "Think of one person you appreciate. Picture their face for 10 seconds."},
    ],
}

SIMPLIFIED_DURATION = 1

HABIT_ANCHORS: List[HabitAnchor] = [
    HabitAnchor(id="anchor-1", label="After waking up", time="morning", description="Right after you get out of bed"),
    HabitAnchor(id="anchor-2", label="After brushing teeth", time="morning", description="Part of your morning routine"),
    HabitAnchor(id="anchor-3", label="After breakfast", time="morning", description="When you finish eating"),
    HabitAnchor(id="anchor-4", label="After lunch", time="afternoon", description="A natural midday break"),
    HabitAnchor(id="anchor-5", label="After work/school", time="afternoon", description="When your main tasks are done"),
    HabitAnchor(id="anchor-6", label="After dinner", time="evening", description="End of the day routine"),
    HabitAnchor(id="anchor-7", label="Before bed", time="evening", description="Wind down for the night"),
    HabitAnchor(id="anchor-8", label="During commute", time="morning", description="While traveling to work/school"),
]


def get_anchor(anchor_id: str) -> Optional[HabitAnchor]:
    return next((a for a in HABIT_ANCHORS if a.id == anchor_id), None)
