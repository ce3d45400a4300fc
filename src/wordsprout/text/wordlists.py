"""Word lists used by the text normalizer and validators."""
from typing import FrozenSet

# Common English stop words
STOP_WORDS: FrozenSet[str] = frozenset("""
a an and are as at be by for from has he in is it its of on that the to was were
will with this but they have had what when where who which why how all each every
both few more most other some such no nor not only own same so than too very just
can should now i you your we our me my him his her she them their us am been being
do does did doing would could might must shall may here there if then else or
because about into through during before after above below up down out off over
under again further once any also even still yet although however either neither
while until unless since whether between against without within along across
behind beyond around among upon toward towards throughout despite oh yeah yes ok
get got go goes going went come came coming make made making take took taking see
saw seeing know knew knowing think thought thinking want wanted say said saying
look looked looking use used using find found finding give gave giving tell told
telling ask asked asking seem seemed leave left put keep kept let begin began help
show showed hear heard play run ran move live lived believe hold held bring brought
happen happened write wrote sit sat stand stood lose lost pay paid meet met include
included continue continued set learn learned change changed lead led understand
understood watch watched follow followed stop stopped create created speak spoke
read allow allowed add added spend spent grow grew open opened walk walked win won
offer offered remember remembered love loved consider considered appear appeared
buy bought wait waited serve served die died send sent expect expected build built
stay stayed fall fell cut reach reached kill killed remain remained
""".split())

# Basic dictionary of words found in early readers
GRADE_LEVEL_WORDS: FrozenSet[str] = frozenset("""
space planet planets earth mars jupiter saturn venus mercury neptune uranus pluto
sun moon star stars galaxy orbit solar system rocket astronaut alien comet asteroid
gravity atmosphere universe cosmic crater telescope satellite dusty cold dry giant
ball gases gas swirling surface solid ground air smells bad rotten eggs visit
smallest largest sideways spins colored dark miss headed fly past round hear
something fun friends friend thing things one two called only know place life around
cat dog bird fish bear rabbit mouse horse cow pig duck chicken sheep goat deer fox
wolf lion tiger elephant monkey snake frog turtle butterfly bee ant spider tree
flower grass leaf branch root seed plant garden forest sky cloud rain snow wind
storm rainbow water river lake ocean sea beach sand rock mountain hill house home
room door window wall floor roof bed chair table desk lamp book page story picture
game toy mom dad mother father brother sister baby family boy girl child children
man woman people person teacher doctor food bread milk juice apple banana orange
grape berry cake cookie candy ice cream cheese egg meat car bus train plane boat
bike truck wheel road street school class lesson test paper pencil pen crayon color
red blue green yellow purple pink brown black white gray gold silver light bright
colors three four five six seven eight nine ten first second third last next number
count many few morning afternoon evening night day week month year today yesterday
tomorrow time hour minute clock watch eat drink sleep wake walk run jump climb swim
sit stand lie fall rise push pull throw catch kick hit cut break fix build draw
paint write read spell add sing dance play laugh cry smile frown talk listen see
look smell taste touch feel think learn teach try work rest clean wash cook bake
grow feed care love like want need wish hope dream imagine pretend believe remember
forget start stop finish big small little large tiny huge tall short long wide thin
thick fat skinny square flat soft hard smooth rough wet hot warm cool new old young
fast slow quick loud quiet noisy silent happy sad angry scared brave shy kind mean
nice good best worst pretty beautiful ugly dirty neat messy full empty hungry
thirsty tired sleepy awake sick healthy strong weak smart silly funny serious true
false real fake same different special normal always never sometimes often usually
soon later now then here there where everywhere somewhere inside outside above
below beside behind between under over near far close away together alone apart
once upon ago lived ever after end beginning middle chapter title author character
hero villain princess prince king queen castle kingdom dragon magic adventure
treasure secret mystery problem answer question idea plan spring summer autumn
winter season weather sunny cloudy rainy snowy windy foggy stormy thunder lightning
head hair face eye eyes ear ears nose mouth teeth tooth tongue neck shoulder arm
arms hand hands finger fingers leg legs foot feet toe toes body heart brain shirt
pants dress skirt shoes socks hat coat jacket sweater nothing everything anything
someone anyone everyone nobody way world part name word words sentence letter
letters sound voice music song movie show party birthday present gift surprise
holiday christmas easter halloween thanksgiving valentine vacation trip
""".split())

# Short and common words accepted without the unknown-word shape rules
COMMON_WORDS: FrozenSet[str] = frozenset("""
a an the i we you he she it they me us my our your his her its their this that
these in on at to for of with by from up down is are was were be been being have
has had do does did will would could should can may and or but if so as no not all
each every go goes went going come came coming see saw look looked want wanted know
knew think thought make made take took get got give gave find found tell told say
said ask asked use used try tried call called need needed feel felt become became
leave left put keep kept let begin began seem help helped show showed hear heard
play played run ran move moved live lived believe believed thing things place
places time times day days way ways man men woman women child children world life
hand hands part parts year years eye eyes head heads face side house home night
room friend friends word words water food good bad new old big small little great
high long young own same right last next first few most other only just more back
still well such even also very much too here there now then space planet planets
earth mars jupiter saturn venus mercury neptune uranus sun moon star stars sky red
blue cold hot dusty dry giant ball gases swirling surface solid ground air smells
rotten eggs visit smallest largest sideways spins colored dark miss headed fly past
round something fun like about into over after two one three four five around
""".split())


def is_known_word(word: str) -> bool:
    """Whether a lowercase word is in the grade-level dictionary or a stop word."""
    return word in GRADE_LEVEL_WORDS or word in STOP_WORDS
