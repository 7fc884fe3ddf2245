"""Pre-written coaching text used when the LLM path is unavailable.

Leaf entries are keyed by (tool_id, item_key) and hold one variant per leaf
band. Every critical pattern carries a word from bands.SEVERITY_TOKENS.
"""
from typing import Dict, List, Tuple


def _leaf(pattern: str, insight: str, action: str, root_belief: str) -> Dict[str, str]:
    return {"pattern": pattern, "insight": insight, "action": action, "root_belief": root_belief}


LEAF_ENTRIES: Dict[Tuple[str, str], Dict[str, Dict[str, str]]] = {
    # Identity & Validation
    ("tool3", "subdomain_1_1"): {
        "critical": _leaf(
            "A severe sense of unworthiness around money shows up as self-sabotage and self-imposed limits",
            "Believing you do not deserve financial freedom is actively keeping stability out of reach",
            "Name one way you have limited your finances out of unworthiness and take one small opposite action this week",
            "I do not deserve financial security or success",
        ),
        "moderate": _leaf(
            "Doubts about your worth sometimes get in the way of financial progress",
            "Part of you does not feel deserving, so you occasionally undercut your own success",
            "Notice unworthy thoughts about money as they come up and answer each with evidence of your competence",
            "I am not sure I deserve financial stability",
        ),
        "healthy": _leaf(
            "You hold a mostly healthy sense of worth with occasional doubts about success",
            "You largely believe you deserve financial wellbeing, with small wobbles",
            "Write down three ways you have handled money responsibly to reinforce that worth",
            "I deserve financial stability and I am learning to own it fully",
        ),
    },
    ("tool3", "subdomain_1_2"): {
        "critical": _leaf(
            "A serious, chronic scarcity mindset drives compulsive choices and blocks any sense of enough",
            "Expecting perpetual scarcity means no amount of money will feel secure",
            "For one week, write down each day what you actually have rather than what you lack",
            "There will never be enough, no matter what I do",
        ),
        "moderate": _leaf(
            "Fear of scarcity sometimes overrides what your numbers actually show",
            "Focusing on what is missing occasionally hides what you already have",
            "Pick one financial resource you have today and notice how it is adequate",
            "I worry there will not be enough",
        ),
        "healthy": _leaf(
            "You keep a mostly balanced view of your resources with some scarcity worry",
            "You generally recognize what you have, with ordinary concern for the future",
            "Keep noting the moments when you have what you need",
            "I generally have enough and I am learning to trust that",
        ),
    },
    ("tool3", "subdomain_1_3"): {
        "critical": _leaf(
            "Severe avoidance keeps you from any accurate picture of your financial reality",
            "Not knowing where you stand makes managing money nearly impossible",
            "Look at one financial fact you have been avoiding, such as a balance or a bill, without trying to fix it yet",
            "Seeing my financial reality would be too overwhelming",
        ),
        "moderate": _leaf(
            "You see parts of your finances clearly and look away from the uncomfortable parts",
            "Selective blindness protects you from anxiety but leaves gaps in your picture",
            "Schedule fifteen minutes this week to review one area you have been avoiding",
            "I am afraid of what I will find if I look too closely",
        ),
        "healthy": _leaf(
            "You see your finances clearly most of the time with a few blind spots",
            "Your avoidance is ordinary discomfort rather than a pattern that runs your choices",
            "Keep a monthly check-in across every account",
            "I can handle seeing my financial reality",
        ),
    },
    ("tool3", "subdomain_2_1"): {
        "critical": _leaf(
            "Treating net worth as self-worth is a critical pattern that drives desperate financial behavior",
            "When your value as a person rides on money, shame and striving never let up",
            "Write down three things that make you valuable that have nothing to do with money",
            "I am only as valuable as my financial status",
        ),
        "moderate": _leaf(
            "You often measure your personal value with financial yardsticks",
            "Linking worth to money adds pressure that your situation does not require",
            "Catch one moment this week when you judge yourself by money and separate the two out loud",
            "My worth is tied to my money even though I know it should not be",
        ),
        "healthy": _leaf(
            "Your sense of worth stands mostly apart from your financial status",
            "You know your value is not set by money, apart from occasional comparison",
            "Keep noticing when identity and finances start to blur",
            "My worth is inherent, not financial",
        ),
    },
    ("tool3", "subdomain_2_2"): {
        "critical": _leaf(
            "A serious need for outside approval drives nearly every financial decision",
            "Worrying about what others think has left you little room to choose for yourself",
            "Make one small money choice based only on what you want",
            "Other people's opinions of my finances matter more than my own needs",
        ),
        "moderate": _leaf(
            "Concern about others' judgment frequently shapes your money choices",
            "Imagined opinions often get a vote in decisions that are yours to make",
            "Before your next purchase, ask what you think before asking what they will think",
            "Financial appearances matter too much to me",
        ),
        "healthy": _leaf(
            "Your financial choices are mostly your own, with normal social awareness",
            "You decide from your values and still weigh context sensibly",
            "Keep asking whose opinion you are considering and why",
            "My financial decisions are mine to make",
        ),
    },
    ("tool3", "subdomain_2_3"): {
        "critical": _leaf(
            "A significant drive to prove yourself through money fuels compulsive earning, spending and comparison",
            "Trying to earn your value through financial achievement can never feel like enough",
            "Identify one way you use money to prove yourself and pause it for a week",
            "I must prove my worth through financial success",
        ),
        "moderate": _leaf(
            "You regularly use money to show that you are competent or enough",
            "Financial achievement sometimes stands in for feeling secure in yourself",
            "When you notice yourself proving something with money, ask what you are really seeking",
            "I often feel I need to prove myself financially",
        ),
        "healthy": _leaf(
            "Your financial goals are mostly driven by your own reasons",
            "You pursue goals for yourself rather than for an audience",
            "Keep checking whether a goal is for you or to prove something",
            "I do not need to prove anything; my worth is inherent",
        ),
    },
    # Love & Connection
    ("tool5", "subdomain_1_1"): {
        "critical": _leaf(
            "Compulsive giving driven by fear of losing love is a severe drain on your finances",
            "Treating love as something you must buy is creating strain and enabling unhealthy dynamics",
            "Say no to one financial request this week and notice that the relationship survives",
            "If I do not give money, I will not be loved",
        ),
        "moderate": _leaf(
            "You often give beyond your means to keep connection safe",
            "Fear of losing closeness pushes your giving past what you can afford",
            "Set one financial boundary with someone you care about and watch what actually happens",
            "Giving money helps secure love and connection",
        ),
        "healthy": _leaf(
            "Your giving is mostly generous and chosen, with occasional fearful over-giving",
            "You give from abundance most of the time",
            "Keep noticing the difference between generous giving and fearful giving",
            "Love does not require financial transactions",
        ),
    },
    ("tool5", "subdomain_1_2"): {
        "critical": _leaf(
            "A serious pattern of self-abandonment puts everyone else's financial needs ahead of yours",
            "Acting as if your needs do not matter leaves you without a foundation of your own",
            "Spend on one genuine need of your own before giving to anyone else this week",
            "My needs do not matter as much as other people's needs",
        ),
        "moderate": _leaf(
            "You regularly put others' financial needs before your own",
            "Caring for others often comes at the cost of neglecting yourself",
            "List your top three financial needs and meet one before helping anyone else",
            "Taking care of myself feels selfish",
        ),
        "healthy": _leaf(
            "You mostly balance your own needs with care for others",
            "Healthy self-care sits alongside your generosity",
            "Keep asking whether you have looked after yourself before looking after them",
            "My needs matter too",
        ),
    },
    ("tool5", "subdomain_1_3"): {
        "critical": _leaf(
            "Refusing all help is a critical pattern that leaves you struggling financially alone",
            "Not letting anyone support you creates hardship that does not need to exist",
            "Accept one small offer of help this week, even something as simple as a coffee",
            "Accepting help means I am weak or in debt to someone",
        ),
        "moderate": _leaf(
            "Receiving support is noticeably hard for you even when you need it",
            "Turning help away adds hardship to situations that could be lighter",
            "When help is offered this week, practice saying yes once",
            "I should handle everything myself",
        ),
        "healthy": _leaf(
            "You can accept help when needed, even if it feels a little uncomfortable",
            "Receiving is available to you, which keeps your relationships balanced",
            "Keep practicing gracious receiving",
            "It is okay to accept help",
        ),
    },
    ("tool5", "subdomain_2_1"): {
        "critical": _leaf(
            "Severe financial dependence on others blocks your autonomy and keeps you trapped",
            "Believing you cannot survive alone makes that dependence feel permanent",
            "Take one step toward independence, such as opening your own account or making one decision alone",
            "I cannot survive financially without someone else",
        ),
        "moderate": _leaf(
            "You lean on others financially more than your situation requires",
            "Reliance you could reduce is limiting your freedom",
            "Choose one area where you could be more self-sufficient and take one step there",
            "I am not sure I can manage money on my own",
        ),
        "healthy": _leaf(
            "You keep your own financial footing while valuing support",
            "Your independence and your connections work together",
            "Keep building skill and confidence in managing on your own",
            "I can handle my finances with or without help",
        ),
    },
    ("tool5", "subdomain_2_2"): {
        "critical": _leaf(
            "A crushing, significant sense of obligation controls your financial decisions",
            "Feeling that you owe everything to those who helped you has cost you your autonomy",
            "Identify one decision you have avoided out of obligation and make it yourself",
            "I owe them everything and can never repay them",
        ),
        "moderate": _leaf(
            "A sense of debt to past helpers limits your financial freedom",
            "Gratitude has turned into obligation that steers your choices",
            "Practice thanking someone without promising anything in return",
            "Help creates a debt that must be repaid",
        ),
        "healthy": _leaf(
            "You hold gratitude for past help without feeling controlled by it",
            "Appreciation and freedom sit comfortably together for you",
            "Keep reminding yourself that thank you does not mean I owe you",
            "Gratitude and freedom can coexist",
        ),
    },
    ("tool5", "subdomain_2_3"): {
        "critical": _leaf(
            "A serious fear of abandonment keeps you holding on to others' financial support at any cost",
            "Believing you will be left if the giving stops keeps you managing others instead of building your own footing",
            "Write down what you would do for yourself if the support ended, and take the first of those steps",
            "If they stop giving, I will be abandoned",
        ),
        "moderate": _leaf(
            "Worry about losing others' support often shapes how you act in relationships",
            "You sometimes protect the flow of help more than the relationship itself",
            "Notice one moment this week when fear of losing support drives what you say or do",
            "I need their help to feel safe in the relationship",
        ),
        "healthy": _leaf(
            "You value others' support without depending on it to feel secure",
            "Your relationships rest on more than what is given",
            "Keep building the habits that let you stand on your own",
            "I am secure whether or not others give to me",
        ),
    },
    # Security & Control
    ("tool7", "subdomain_1_1"): {
        "critical": _leaf(
            "Severe control patterns around money create rigidity, exhaustion and isolation",
            "Needing to control every variable is raising your stress and shutting out help",
            "Let one small financial variable go this week and notice that you can handle it",
            "If I do not control everything, it will all fall apart",
        ),
        "moderate": _leaf(
            "A strong need for financial control sometimes crowds out flexibility",
            "Tight control over outcomes occasionally backfires",
            "Tolerate one area of financial uncertainty this week without stepping in",
            "Control keeps me safe",
        ),
        "healthy": _leaf(
            "You plan responsibly and stay flexible when needed",
            "You manage money well without gripping every detail",
            "Keep balancing planning with flexibility",
            "I can plan without needing total control",
        ),
    },
    ("tool7", "subdomain_1_2"): {
        "critical": _leaf(
            "A serious distrust of others leaves you carrying every financial decision alone",
            "Expecting people to fail you keeps you from systems and support that would lighten the load",
            "Delegate one small financial task to someone reliable this week and observe the result",
            "Other people will always let me down",
        ),
        "moderate": _leaf(
            "You often keep financial matters to yourself rather than rely on others",
            "Self-reliance protects you but also isolates you",
            "Share one financial decision with someone you trust before making it",
            "It is safer to depend only on myself",
        ),
        "healthy": _leaf(
            "You trust others appropriately while staying responsible for your finances",
            "Your self-reliance leaves room for support",
            "Keep extending trust where it has been earned",
            "I can rely on the right people",
        ),
    },
    ("tool7", "subdomain_1_3"): {
        "critical": _leaf(
            "Treating help as weakness is a critical pattern that keeps you suffering in silence",
            "Refusing help to avoid looking weak turns manageable problems into heavy burdens",
            "Ask for one specific piece of help this week and notice how it is received",
            "Needing help means I have failed",
        ),
        "moderate": _leaf(
            "Asking for help often feels like admitting failure",
            "You push through alone in places where support would serve you better",
            "Name one situation where asking for help would save you real effort and ask",
            "Strong people handle things on their own",
        ),
        "healthy": _leaf(
            "You can ask for help without feeling diminished",
            "Seeking support is part of how you manage well",
            "Keep treating requests for help as a sign of good judgment",
            "Asking for help is a strength",
        ),
    },
    ("tool7", "subdomain_2_1"): {
        "critical": _leaf(
            "Severe catastrophic thinking paralyzes financial action and invites self-sabotage",
            "Imagining the worst outcome for every decision keeps you from moving at all",
            "Take one small financial action this week despite the catastrophic thoughts",
            "The worst will definitely happen",
        ),
        "moderate": _leaf(
            "Your mind frequently jumps to worst-case financial outcomes",
            "Catastrophizing adds anxiety that the facts do not support",
            "When the worst case comes to mind, write down what is most likely to happen instead",
            "Things usually go badly",
        ),
        "healthy": _leaf(
            "You assess financial risks realistically",
            "You weigh risks without jumping to catastrophe",
            "Keep reality-testing your financial worries",
            "Most outcomes are neutral or manageable",
        ),
    },
    ("tool7", "subdomain_2_2"): {
        "critical": _leaf(
            "A significant fear of change keeps you in financial situations that are not working",
            "Staying with the familiar feels safer even when it costs you",
            "Pick one small change you have been postponing and make it this week",
            "Change is more dangerous than what I have now",
        ),
        "moderate": _leaf(
            "You often choose the familiar over a better but unknown option",
            "Fear of change is holding back reasonable improvements",
            "Identify one safe-enough change and take the first step",
            "Better the devil I know",
        ),
        "healthy": _leaf(
            "You can make changes when the familiar stops serving you",
            "Caution about change does not stop you from improving",
            "Keep balancing caution with openness to change",
            "I can handle change when it is needed",
        ),
    },
    ("tool7", "subdomain_2_3"): {
        "critical": _leaf(
            "A serious pattern of expecting betrayal keeps pulling you toward people who confirm it",
            "Believing you always trust the wrong people makes it hard to recognize trustworthy ones",
            "Before your next financial commitment with someone, list the evidence for and against their reliability",
            "I will always be betrayed",
        ),
        "moderate": _leaf(
            "Past betrayals often color who you trust with money",
            "Expecting to be let down sometimes leads you to overlook warning signs or good partners",
            "Review one current financial relationship using facts rather than fear",
            "I cannot tell who is trustworthy",
        ),
        "healthy": _leaf(
            "You choose whom to trust with care",
            "Your judgment about people is serving your finances",
            "Keep checking trust against evidence",
            "I can recognize trustworthy people",
        ),
    },
}

GENERIC_LEAF: Dict[str, Dict[str, str]] = {
    "critical": _leaf(
        "This area shows a significant pattern that impacts your financial wellbeing",
        "Your scores show this pattern affecting several parts of your financial life",
        "Bring awareness to this pattern by noticing when it shows up in daily money decisions",
        "An underlying belief here is worth exploring with reflection or support",
    ),
    "moderate": _leaf(
        "This area shows a moderate pattern with room for growth",
        "Your scores suggest this pattern sometimes interferes with your financial clarity",
        "Notice when this pattern appears and experiment with a different response",
        "Some belief is driving this pattern and is worth exploring",
    ),
    "healthy": _leaf(
        "This area shows relative health with continued growth possible",
        "Your scores show awareness and healthy practices here",
        "Keep building on your strengths in this area",
        "Healthy beliefs are supporting you in this area",
    ),
}

# (tool_id, group_key) -> summary sentence, themes
GROUP_ENTRIES: Dict[Tuple[str, str], Dict[str, object]] = {
    ("tool3", "domain1"): {
        "summary": "Your False Self-View patterns describe how clearly you see yourself and your financial reality.",
        "key_themes": [
            "How accurately you see yourself and your financial situation",
            "Protective distortions that hide uncomfortable facts",
            "Building genuine self-awareness and financial clarity",
        ],
    },
    ("tool3", "domain2"): {
        "summary": "Your External Validation patterns describe how much others' opinions steer your financial decisions.",
        "key_themes": [
            "Trust in your own financial judgment",
            "Reliance on others' approval for money decisions",
            "Developing internal financial authority",
        ],
    },
    ("tool5", "domain1"): {
        "summary": "Your Issues Showing Love patterns describe how you use money to secure connection.",
        "key_themes": [
            "Money as a tool for maintaining relationships",
            "Financial boundaries in close relationships",
            "Separating love from financial transactions",
        ],
    },
    ("tool5", "domain2"): {
        "summary": "Your Issues Receiving Love patterns describe how you accept help and keep your financial independence.",
        "key_themes": [
            "Healthy financial interdependence",
            "Dependence on support or refusal of it",
            "Balancing giving and receiving",
        ],
    },
    ("tool7", "domain1"): {
        "summary": "Your Control Leading to Isolation patterns describe how you manage anxiety through control and self-reliance.",
        "key_themes": [
            "Managing anxiety through financial control",
            "Rejecting help and systems",
            "Building trust in flexibility and support",
        ],
    },
    ("tool7", "domain2"): {
        "summary": "Your Fear Leading to Isolation patterns describe how fear of disaster shapes your financial decisions.",
        "key_themes": [
            "Worst-case thinking driving decisions",
            "Fear blocking growth and change",
            "Developing realistic risk assessment",
        ],
    },
}

GENERIC_GROUP_THEMES: List[str] = [
    "Patterns that affect your financial clarity and wellbeing",
    "Opportunities for growth",
    "Starting points for new habits",
]

GROUP_BAND_SENTENCES: Dict[str, str] = {
    "healthy": "Overall this domain is a source of strength; the work here is to maintain and deepen what is already working.",
    "mixed": "This domain holds both strengths and patterns that need attention, so the work is to build on what works while addressing the gaps.",
    "problematic": "This domain shows a significant pattern of disconnection, and the patterns here reinforce each other enough to call for focused corrective work.",
}

OVERALL_ENTRIES: Dict[str, Dict[str, str]] = {
    "tool3": {
        "overview": (
            "Your assessment looks at how connected you are to yourself in your financial life: how clearly "
            "you see your own financial reality and how much you rely on others' approval to make decisions."
        ),
        "integration": (
            "False Self-View and External Validation feed each other. When you cannot see yourself clearly you "
            "lean on others' opinions, and leaning on others makes your own view harder to trust."
        ),
        "core_work": (
            "The central shift is building internal authority on clear self-knowledge: seeing your finances "
            "accurately and trusting your own judgment about them."
        ),
    },
    "tool5": {
        "overview": (
            "Your assessment looks at how money and connection are entangled for you: how you give to others "
            "and how you receive from them."
        ),
        "integration": (
            "Issues Showing Love and Issues Receiving Love form a push and pull. Over-giving, dependence and "
            "refusing help all keep you from healthy financial interdependence."
        ),
        "core_work": (
            "The central shift is separating money from love, so that you give from choice rather than fear "
            "and receive from openness rather than need or resistance."
        ),
    },
    "tool7": {
        "overview": (
            "Your assessment looks at how much you trust life with your finances: how tightly you hold control "
            "and how strongly fear of disaster steers your choices."
        ),
        "integration": (
            "Control and fear reinforce each other. The more you fear disaster the more you control, and the "
            "more you control the more anxious you become about what you cannot control."
        ),
        "core_work": (
            "The central shift is trusting your ability to handle uncertainty, loosening rigid control and "
            "replacing catastrophic thinking with realistic risk assessment."
        ),
    },
}

GENERIC_OVERALL: Dict[str, str] = {
    "overview": "Your assessment reveals patterns that affect your financial life to different degrees across its areas.",
    "integration": "The domains interact to create your overall pattern, and seeing how they influence each other makes change more effective.",
    "core_work": "The fundamental work is building awareness of these patterns and practicing new responses when they arise.",
}

OVERALL_BAND_SENTENCES: Dict[str, str] = {
    "healthy": "Your scores show solid grounding overall, so the path forward is about maintaining and deepening your strengths.",
    "mixed": "Your scores show a mix of grounding and disconnection, so the path forward balances building on strengths with addressing gaps.",
    "problematic": "Your scores show a significant, ongoing disconnection, so the path forward calls for steady corrective work.",
}
