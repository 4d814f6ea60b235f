"""Prompt tables: sound effects, music tracks and voice lines.

Plain configuration data. Nothing here knows how audio is generated or
assembled.
"""

from soundbank.models import SfxSpec, TrackSpec, VoiceLine

SFX = [
    SfxSpec("click-1", "Subtle modern UI click sound, clean soft tap, 100ms, minimal, professional game interface"),
    SfxSpec("click-2", "Gentle digital interface tap, light tactile click, 80ms, polished, subtle resonance"),
    SfxSpec("click-3", "Clean soft button press sound, delicate click with tiny reverb tail, 120ms, modern game UI"),
    SfxSpec("confirm-1", "Elegant confirmation tone, gentle ascending two-note chime, warm and satisfying, 200ms, modern UI"),
    SfxSpec("confirm-2", "Soft success notification sound, pleasant rising tone with subtle shimmer, 180ms, clean and warm"),
    SfxSpec("build-1", "Solid placement thud with light metallic ring, construction confirmation, 250ms, grounded and satisfying"),
    SfxSpec("build-2", "Mechanical lock-in-place sound, sturdy click with brief harmonic ring, 200ms, building game"),
    SfxSpec("research-1", "Discovery unlock sound, bright crystalline ascending tone with soft electric hum, 300ms, technology reveal"),
    SfxSpec("error-1", "Soft denial tone, brief low two-note descending sound, 120ms, gentle but clear rejection, modern UI"),
    SfxSpec("error-2", "Muted warning buzz, short low-frequency pulse, 100ms, not harsh, professional game feedback"),
    SfxSpec("select-1", "Quick subtle selection tick, soft high-frequency tap, 60ms, barely there, refined game interface"),
    SfxSpec("select-2", "Light digital ping, minimal selection indicator, 70ms, clean and unobtrusive, strategy game"),
    SfxSpec("command-1", "Crisp command acknowledgment, brief focused ping with authority, 80ms, military strategy game"),
    SfxSpec("command-2", "Short tactical confirmation beep, clean and decisive, 90ms, subtle authority, strategy game command"),
]

MUSIC = [
    TrackSpec(
        key="music-title",
        base=(
            "Ambient cinematic soundtrack, slow evolving pad layers, deep warm bass drone, "
            "gentle atmospheric reverb, mysterious and inviting mood, corporate strategy game "
            "menu screen, 22 seconds"
        ),
        variations=(
            "soft distant piano melody, opening theme",
            "ethereal choir pads building slowly, wide stereo",
            "delicate piano arpeggios with soft tape delay",
            "deep sub bass pulse with distant wind textures",
            "crystalline bell tones drifting over warm drone",
            "soft analog synthesizer sweep with gentle filter movement",
            "ambient strings fading in and out, emotional",
            "subtle granular texture with warmth and space",
            "distant melodic fragments over deep evolving pad",
            "soft Rhodes electric piano chords with tape echo",
            "slowly building atmospheric tension, harmonic overtones",
            "gentle cinematic swell with emotional string layer",
            "minimal ambient pulse with soft spectral shimmer",
            "ethereal vocal texture blending into warm bass",
            "soft marimba melody over ambient pad layers",
            "deep space atmosphere with distant tonal movements",
            "warm analog pad evolving with subtle modulation",
            "gentle harp-like arpeggios floating over bass drone",
            "slow cinematic build with emotional piano notes",
            "ambient electronic textures with warm organic feel",
            "mysterious evolving soundscape with gentle tonal shifts",
            "soft closing movement with fading piano and reverb tail",
        ),
    ),
    TrackSpec(
        key="music-game",
        base=(
            "Mid-tempo cinematic strategy game soundtrack, layered orchestral strings with soft "
            "electronic pulse, steady subtle percussion, hopeful yet focused mood, clean modern "
            "production, 22 seconds"
        ),
        variations=(
            "warm analog synth pads underneath, opening statement",
            "building string section with soft snare rhythm",
            "electronic arpeggio pattern over orchestral bed",
            "bold French horn melody with pulsing bass",
            "quiet bridge section, soft piano with string tremolo",
            "driving cello ostinato with electronic hi-hats",
            "hopeful ascending melody, layered synth and strings",
            "percussive breakdown with filtered synth stabs",
            "sweeping orchestral crescendo with timpani rolls",
            "intimate section, solo violin over warm pad",
            "rhythmic pulse building with layered percussion",
            "bright brass accents over flowing string lines",
            "electronic bass groove with orchestral countermelody",
            "atmospheric bridge, reverb-heavy piano and pads",
            "energetic section with driving snare and strings",
            "melodic development, woodwinds joining string theme",
            "synth lead melody with orchestral accompaniment",
            "dynamic shift, powerful low brass and percussion",
            "gentle interlude, acoustic guitar texture with pads",
            "building momentum, full orchestra with electronic pulse",
            "triumphant melody restated with full arrangement",
            "resolving section, warm chords fading gently",
        ),
    ),
    TrackSpec(
        key="music-battle",
        base=(
            "Intense cinematic strategy game soundtrack, driving rhythmic percussion, urgent "
            "string ostinato, powerful brass, rising tension, layered electronic bass, "
            "competitive high-stakes mood, 22 seconds"
        ),
        variations=(
            "dramatic opening with timpani and brass stabs",
            "fast string tremolo with aggressive electronic bass",
            "pounding war drums with dissonant brass chords",
            "urgent violin ostinato over driving beat",
            "powerful horn section with relentless percussion",
            "electronic glitch percussion with orchestral hits",
            "menacing low brass melody with snare rolls",
            "intense staccato strings with rising synth tension",
            "massive orchestral hit followed by driving rhythm",
            "chaotic battle energy, layered percussion breakdown",
            "dark cello theme with aggressive electronic pulse",
            "epic brass fanfare over thunderous drums",
            "suspenseful quiet section, tense pizzicato strings",
            "explosive return with full orchestra and percussion",
            "relentless driving rhythm with distorted bass",
            "fierce string runs with powerful brass counterpoint",
            "electronic warfare sounds merged with orchestral drama",
            "climactic build with layered percussion crescendo",
            "intense melodic peak, triumphant yet dangerous",
            "aggressive synth arpeggios with orchestral backing",
            "final battle energy, everything at full intensity",
            "dramatic conclusion with sustained brass and fade",
        ),
    ),
]

VOICE_LINES = {
    "select": {
        "sales_rep": ["Ready to sell!", "What's the target?", "Always be closing.", "Point me at a prospect.", "Let's get after it.", "Show me the money.", "I've got my pitch ready.", "Where do you need me boss?"],
        "sr_sales_rep": ["Senior rep reporting.", "I'll handle the big fish.", "Nobody closes like me.", "Ready for the hard sell.", "Time to steal some accounts.", "I eat quotas for breakfast.", "Let me at their best customers.", "Experience wins deals."],
        "marketer": ["Marketing is live!", "Let's build some buzz.", "I'll bring them to us.", "Content is king.", "Generating demand!", "Brand awareness incoming.", "Let me work my magic.", "Prospects won't know what hit them."],
        "service_rep": ["Customer success, standing by.", "I'll keep them loyal.", "Nobody poaches on my watch.", "CS rep reporting in.", "Retention is my game.", "I've got our accounts covered.", "They'll never want to leave.", "Send me where you need me."],
        "ai_agent": ["AI systems online.", "Processing targets.", "Neural networks engaged.", "Efficiency optimized.", "I compute, therefore I close.", "Running sales algorithm.", "Target acquired. Probability: high.", "Beep boop. Just kidding. Let's sell."],
        "talent_acq": ["HR on standby.", "I see talent everywhere.", "Who's their best closer?", "Time to make an offer they can't refuse.", "Headhunter ready.", "Let me check their LinkedIn.", "I know everyone in this industry.", "Talent acquisition, reporting in."],
    },
    "command": {
        "sales_rep": ["I'm on it!", "On my way.", "Consider it done.", "Moving out!", "Let's close this one.", "Get the gong ready!"],
        "sr_sales_rep": ["I'll handle this personally.", "This one's mine.", "Watch and learn.", "Easy money.", "I'll have them signing by tonight."],
        "marketer": ["Heading out!", "I'll spread the word.", "On the move.", "Marketing blitz incoming."],
        "service_rep": ["On my way to defend.", "CS incoming.", "I'll block the poach.", "Heading to protect the account."],
        "ai_agent": ["Executing directive.", "Target locked.", "Optimal route calculated.", "Processing... en route.", "Compliance probability: 94%."],
        "talent_acq": ["Sourcing the target.", "Making contact.", "Setting up the interview.", "Extending the offer.", "They won't say no to this package."],
    },
    "system": {
        "building": ["Construction underway.", "Building in progress.", "Expanding operations.", "New facility under construction."],
        "buildComplete": ["Construction complete!", "Building ready for business.", "New facility online.", "Structure complete. Looking good."],
        "training": ["New recruit in training.", "Rep onboarding started.", "Training in progress.", "Getting them sales-ready."],
        "trainComplete": {
            "sales_rep": ["Sales rep trained and ready to close deals!", "New rep reporting for duty.", "Fresh legs on the team. Let's go!", "Ready to get after it, boss!"],
            "sr_sales_rep": ["Senior rep locked and loaded.", "Heavy hitter ready to roll.", "The closer has arrived.", "Time to show them how it's done."],
            "marketer": ["Marketer ready to generate buzz!", "Brand champion reporting in.", "Let's make some noise!", "The pipeline builder is here."],
            "service_rep": ["CS rep trained and ready!", "Customer defender online.", "No poaching on my watch.", "Customer success expert reporting."],
            "ai_agent": ["AI SDR fully operational.", "Machine learning complete. Ready to sell.", "Artificial intelligence, real results.", "Neural nets trained. Targets loading."],
            "talent_acq": ["Talent Acquisition specialist ready.", "Headhunter on the prowl.", "Time to poach their best people.", "HR's secret weapon is online."],
        },
        "researching": ["R and D in progress.", "Scientists are working on it.", "Research underway.", "Lab is cooking something up."],
        "researchComplete": ["Research complete! New tech unlocked.", "Breakthrough! Technology upgraded.", "R and D delivers again.", "Tech upgrade ready to deploy."],
        "dealWon": ["Deal closed! Get the gong!", "Ka-ching! Another one signed.", "Winner winner, chicken dinner!", "That's how we do it!", "Revenue baby! Let's go!", "Signed, sealed, delivered!"],
        "dealStolen": ["Hostile takeover! We stole one!", "Poached from the competition!", "That's our customer now!", "Ripped it right from under them!"],
        "enemyStole": ["They stole one of our accounts!", "We lost a customer! Fight back!", "Competitor took one. Not cool.", "Account lost. Time to retaliate."],
        "poachSuccess": ["We poached their best rep!", "Welcome to the team! Great hire.", "Their loss, our gain!", "Talent acquired! They'll be furious."],
        "poachFail": ["They got away. Back to sourcing.", "Offer rejected. We'll find another.", "Poach attempt failed. Regroup."],
        "negotiationWon": ["Our HR outplayed theirs!", "Talent war won! We captured their recruiter.", "Hostile takeover of their HR department!"],
        "negotiationLost": ["We lost the talent war!", "Their recruiter got the upper hand.", "HR battle lost. Regroup."],
        "sabotageSuccess": ["Their loyalty is crumbling!", "Sabotage successful. Their customers are wavering.", "Marketing blitz landed. They're losing faith."],
        "customerChurned": ["Customer left. We need CS reps out there.", "Churn alert! Deploy service reps.", "We lost one to churn. Lock down the rest."],
        "winCondProgress": ["Almost there! Just a few more accounts!", "We're closing in on victory!", "The finish line is in sight!"],
        "lowCash": ["Budget's getting tight.", "Cash reserves running low.", "Watch the burn rate, boss."],
        "enemyGrowing": ["They're pulling ahead.", "Competitor is gaining ground.", "We need to pick up the pace."],
        "acquisition": ["Initiating hostile takeover!", "M and A department activated.", "Preparing acquisition paperwork."],
        "acquisitionComplete": ["Acquisition complete! Their customers are ours.", "Hostile takeover successful!", "We just bought the competition."],
        "acquisitionThreat": ["Hostile takeover incoming! Shore up the balance sheet!", "They're trying to acquire us! Get cash above fifty K!", "M and A threat detected. We need revenue, now!"],
        "firstDeal": ["First deal! We're in business!", "Our first customer. Let's get more!"],
        "share50": ["You control half the market!", "Fifty percent market share. Dominant."],
        "share75": ["Seventy-five percent! Total domination is near."],
        "idleUnits": ["Idle reps detected. Deploy them!", "We have reps sitting around. Put them to work."],
        "bleeding": ["We're bleeding cash.", "Burn rate exceeds revenue. Cut costs or close deals."],
    },
}


def collect_voice_lines(table: dict = VOICE_LINES) -> list[VoiceLine]:
    """Flatten the voice table into lines with deterministic filenames."""
    lines = []

    for category in ("select", "command"):
        for unit_type, texts in table.get(category, {}).items():
            for i, text in enumerate(texts):
                lines.append(VoiceLine(text, unit_type, f"{category}-{unit_type}-{i}.mp3"))

    for key, value in table.get("system", {}).items():
        if isinstance(value, dict):
            for unit_type, texts in value.items():
                for i, text in enumerate(texts):
                    lines.append(VoiceLine(text, unit_type, f"system-{key}_{unit_type}-{i}.mp3"))
        else:
            for i, text in enumerate(value):
                lines.append(VoiceLine(text, "system", f"system-{key}-{i}.mp3"))

    return lines


def find_track(key: str, tracks: list[TrackSpec] = MUSIC) -> TrackSpec:
    for track in tracks:
        if track.key == key:
            return track
    raise KeyError(f"Unknown track: {key}")
