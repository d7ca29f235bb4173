from types import MappingProxyType
from typing import NamedTuple

## How to draw one kind of event, and how it behaves when it is placed.
class EventDescriptor(NamedTuple):
    # The animation library that holds the event's sprite.
    library: str
    set_id: int
    animation_id: int
    # Events that feel gravity are drawn resting on the ground below them.
    feels_gravity: bool
    # Pickups float and bob up and down.
    is_pickup: bool
    # When falling, the hotspot rather than the bottom edge meets the ground.
    use_hotspot_for_gravity: bool
    # The sprite is offset by its hotspot even when it does not feel gravity.
    always_adjust_position: bool
    # From 0 to 100, the opacity as a percentage. 200 draws the sprite inside
    # a crate and 300 draws it inside a monitor.
    opacity_or_draw_mode: int
    display_name: str

## The events that can be drawn, keyed by event code.
EVENT_TABLE = MappingProxyType({
    29: EventDescriptor('Anims.j2a', 55, 12, False, False, False, False, 100, 'Jazz Level Start'),
    30: EventDescriptor('Anims.j2a', 89, 12, False, False, False, False, 100, 'Spaz Level Start'),
    31: EventDescriptor('Anims.j2a', 89, 12, False, False, False, False, 100, 'Multiplayer Level Start'),
    32: EventDescriptor('Anims.j2a', 61, 12, False, False, False, False, 100, 'Lori Level Start'),
    33: EventDescriptor('Anims.j2a', 0, 29, False, True, False, False, 100, 'Freezer Ammo+3'),
    34: EventDescriptor('Anims.j2a', 0, 25, False, True, False, False, 100, 'Bouncer Ammo+3'),
    35: EventDescriptor('Anims.j2a', 0, 34, False, True, False, False, 100, 'Seeker Ammo+3'),
    36: EventDescriptor('Anims.j2a', 0, 49, False, True, False, False, 100, '3Way Ammo+3'),
    37: EventDescriptor('Anims.j2a', 0, 57, False, True, False, False, 100, 'Toaster Ammo+3'),
    38: EventDescriptor('Anims.j2a', 0, 59, False, True, False, False, 100, 'TNT Ammo+3'),
    39: EventDescriptor('Anims.j2a', 0, 62, False, True, False, False, 100, 'Gun8 Ammo+3'),
    40: EventDescriptor('Anims.j2a', 0, 68, False, True, False, False, 100, 'Gun9 Ammo+3'),
    41: EventDescriptor('Anims.j2a', 103, 4, True, False, False, False, 100, 'Still Turtleshell'),
    42: EventDescriptor('Anims.j2a', 106, 1, False, False, False, False, 100, 'Swinging Vine'),
    43: EventDescriptor('Anims.j2a', 0, 1, False, False, False, False, 100, 'Bomb'),
    44: EventDescriptor('Anims.j2a', 71, 84, False, True, False, False, 100, 'Silver Coin'),
    45: EventDescriptor('Anims.j2a', 71, 37, False, True, False, False, 100, 'Gold Coin'),
    46: EventDescriptor('Anims.j2a', 71, 5, True, False, False, False, 100, 'Gun crate'),
    47: EventDescriptor('Anims.j2a', 71, 5, True, False, False, False, 100, 'Carrot crate'),
    48: EventDescriptor('Anims.j2a', 71, 5, True, False, False, False, 100, '1Up crate'),
    49: EventDescriptor('Anims.j2a', 71, 3, True, False, False, False, 100, 'Gem barrel'),
    50: EventDescriptor('Anims.j2a', 71, 3, True, False, False, False, 100, 'Carrot barrel'),
    51: EventDescriptor('Anims.j2a', 71, 3, True, False, False, False, 100, '1up barrel'),
    52: EventDescriptor('Anims.j2a', 71, 5, True, False, False, False, 100, 'Bomb Crate'),
    53: EventDescriptor('Anims.j2a', 71, 55, True, False, False, False, 100, 'Freezer Ammo+15'),
    54: EventDescriptor('Anims.j2a', 71, 54, True, False, False, False, 100, 'Bouncer Ammo+15'),
    55: EventDescriptor('Anims.j2a', 71, 56, True, False, False, False, 100, 'Seeker Ammo+15'),
    56: EventDescriptor('Anims.j2a', 71, 57, True, False, False, False, 100, '3Way Ammo+15'),
    57: EventDescriptor('Anims.j2a', 71, 58, True, False, False, False, 100, 'Toaster Ammo+15'),
    58: EventDescriptor('Anims.j2a', 71, 90, False, False, False, False, 100, 'TNT (armed explosive, no pickup)'),
    59: EventDescriptor('Anims.j2a', 71, 36, False, True, False, False, 100, 'Airboard'),
    60: EventDescriptor('Anims.j2a', 96, 5, True, False, False, False, 100, 'Frozen Green Spring'),
    61: EventDescriptor('Anims.j2a', 71, 29, False, True, False, False, 100, 'Gun Fast Fire'),
    62: EventDescriptor('Anims.j2a', 71, 5, True, False, False, False, 100, 'Spring Crate'),
    63: EventDescriptor('Anims.j2a', 71, 22, False, True, False, False, 100, 'Red Gem +1'),
    64: EventDescriptor('Anims.j2a', 71, 22, False, True, False, False, 100, 'Green Gem +1'),
    65: EventDescriptor('Anims.j2a', 71, 22, False, True, False, False, 100, 'Blue Gem +1'),
    66: EventDescriptor('Anims.j2a', 71, 22, False, True, False, False, 100, 'Purple Gem +1'),
    67: EventDescriptor('Anims.j2a', 71, 34, False, False, False, False, 100, 'Super Red Gem'),
    68: EventDescriptor('Anims.j2a', 8, 3, True, False, False, False, 100, 'Birdy'),
    69: EventDescriptor('Anims.j2a', 71, 3, True, False, False, False, 100, 'Gun Barrel'),
    70: EventDescriptor('Anims.j2a', 71, 5, True, False, False, False, 100, 'Gem Crate'),
    71: EventDescriptor('Anims.j2a', 71, 70, True, False, False, False, 100, 'Jazz<->Spaz'),
    72: EventDescriptor('Anims.j2a', 71, 21, False, True, False, False, 100, 'Carrot Energy +1'),
    73: EventDescriptor('Anims.j2a', 71, 82, False, True, False, False, 100, 'Full Energy'),
    74: EventDescriptor('Anims.j2a', 71, 31, True, False, False, False, 100, 'Fire Shield'),
    75: EventDescriptor('Anims.j2a', 71, 10, True, False, False, False, 100, 'Water Shield'),
    76: EventDescriptor('Anims.j2a', 71, 51, True, False, False, False, 100, 'Lightning Shield'),
    79: EventDescriptor('Anims.j2a', 71, 33, False, True, False, False, 100, 'Fast Feet'),
    80: EventDescriptor('Anims.j2a', 71, 0, False, True, False, False, 100, 'Extra Live'),
    81: EventDescriptor('Anims.j2a', 71, 28, True, False, False, False, 100, 'End of Level signpost'),
    83: EventDescriptor('Anims.j2a', 71, 14, True, False, False, False, 100, 'Save point signpost'),
    84: EventDescriptor('Anims.j2a', 11, 0, True, False, False, False, 100, 'Bonus Level signpost'),
    85: EventDescriptor('Anims.j2a', 96, 7, True, False, False, False, 100, 'Red Spring'),
    86: EventDescriptor('Anims.j2a', 96, 5, True, False, False, False, 100, 'Green Spring'),
    87: EventDescriptor('Anims.j2a', 96, 0, True, False, False, False, 100, 'Blue Spring'),
    88: EventDescriptor('Anims.j2a', 71, 72, False, True, False, False, 100, 'Invincibility'),
    89: EventDescriptor('Anims.j2a', 71, 87, False, True, False, False, 100, 'Extra Time'),
    90: EventDescriptor('Anims.j2a', 71, 42, False, True, False, False, 100, 'Freeze Enemies'),
    91: EventDescriptor('Anims.j2a', 96, 8, False, False, False, False, 100, 'Hor Red Spring'),
    92: EventDescriptor('Anims.j2a', 96, 6, False, False, False, False, 100, 'Hor Green Spring'),
    93: EventDescriptor('Anims.j2a', 96, 1, False, False, False, False, 100, 'Hor Blue Spring'),
    95: EventDescriptor('Anims.j2a', 71, 52, True, False, False, False, 100, 'Scenery Trigger Crate'),
    96: EventDescriptor('Anims.j2a', 71, 40, False, True, False, False, 100, 'Fly carrot'),
    97: EventDescriptor('Plus.j2a', 1, 2, False, True, False, False, 100, 'Red RectGem +1'),
    98: EventDescriptor('Plus.j2a', 1, 2, False, True, False, False, 100, 'Green RectGem +1'),
    99: EventDescriptor('Plus.j2a', 1, 2, False, True, False, False, 100, 'Blue RectGem +1'),
    100: EventDescriptor('Anims.j2a', 102, 0, True, False, False, False, 100, 'Tuf Turt'),
    101: EventDescriptor('Anims.j2a', 101, 5, True, False, False, False, 100, 'Tuf Boss'),
    102: EventDescriptor('Anims.j2a', 59, 2, True, False, False, False, 100, 'Lab Rat'),
    103: EventDescriptor('Anims.j2a', 32, 0, True, False, False, False, 100, 'Dragon'),
    104: EventDescriptor('Anims.j2a', 60, 4, True, False, False, False, 100, 'Lizard'),
    105: EventDescriptor('Anims.j2a', 15, 0, False, False, False, True, 100, 'Bee'),
    106: EventDescriptor('Anims.j2a', 76, 2, False, False, False, True, 66, 'Rapier'),
    107: EventDescriptor('Anims.j2a', 88, 0, False, False, False, True, 100, 'Sparks'),
    108: EventDescriptor('Anims.j2a', 1, 1, False, False, False, True, 100, 'Bat'),
    109: EventDescriptor('Anims.j2a', 99, 6, True, False, False, False, 100, 'Sucker'),
    110: EventDescriptor('Anims.j2a', 20, 0, False, False, False, True, 100, 'Caterpillar'),
    111: EventDescriptor('Anims.j2a', 18, 2, False, False, False, False, 100, 'Cheshire1'),
    112: EventDescriptor('Anims.j2a', 19, 2, False, False, False, False, 100, 'Cheshire2'),
    113: EventDescriptor('Anims.j2a', 52, 4, True, False, False, False, 100, 'Hatter'),
    114: EventDescriptor('Anims.j2a', 7, 4, True, False, False, False, 100, 'Bilsy Boss'),
    115: EventDescriptor('Anims.j2a', 83, 2, True, False, False, False, 100, 'Skeleton'),
    116: EventDescriptor('Anims.j2a', 29, 0, True, False, False, False, 100, 'Doggy Dogg'),
    117: EventDescriptor('Anims.j2a', 103, 7, True, False, False, False, 100, 'Norm Turtle'),
    118: EventDescriptor('Anims.j2a', 53, 0, True, False, False, False, 100, 'Helmut'),
    120: EventDescriptor('Anims.j2a', 24, 0, True, False, False, False, 100, 'Demon'),
    123: EventDescriptor('Anims.j2a', 31, 0, False, False, False, False, 100, 'Dragon Fly'),
    124: EventDescriptor('Anims.j2a', 67, 6, True, False, False, False, 100, 'Monkey'),
    125: EventDescriptor('Anims.j2a', 41, 1, True, False, False, False, 100, 'Fat Chick'),
    126: EventDescriptor('Anims.j2a', 42, 0, True, False, False, False, 100, 'Fencer'),
    127: EventDescriptor('Anims.j2a', 43, 0, False, False, False, False, 100, 'Fish'),
    128: EventDescriptor('Anims.j2a', 68, 3, True, False, False, False, 100, 'Moth'),
    129: EventDescriptor('Anims.j2a', 97, 0, True, False, False, False, 100, 'Steam'),
    130: EventDescriptor('Anims.j2a', 79, 0, False, False, False, True, 100, 'Rotating Rock'),
    131: EventDescriptor('Anims.j2a', 71, 60, True, False, False, False, 100, 'Blaster PowerUp'),
    132: EventDescriptor('Anims.j2a', 71, 61, True, False, False, False, 100, 'Bouncy PowerUp'),
    133: EventDescriptor('Anims.j2a', 71, 62, True, False, False, False, 100, 'Ice gun PowerUp'),
    134: EventDescriptor('Anims.j2a', 71, 63, True, False, False, False, 100, 'Seek PowerUp'),
    135: EventDescriptor('Anims.j2a', 71, 64, True, False, False, False, 100, 'RF PowerUp'),
    136: EventDescriptor('Anims.j2a', 71, 65, True, False, False, False, 100, 'Toaster PowerUP'),
    137: EventDescriptor('Anims.j2a', 72, 4, False, False, False, True, 100, 'PIN => Left Paddle'),
    138: EventDescriptor('Anims.j2a', 72, 5, False, False, False, True, 100, 'PIN => Right Paddle'),
    139: EventDescriptor('Anims.j2a', 72, 0, False, False, False, True, 100, 'PIN => 500 Bump'),
    140: EventDescriptor('Anims.j2a', 72, 2, False, False, False, True, 100, 'PIN => Carrot Bump'),
    141: EventDescriptor('Anims.j2a', 71, 1, False, True, False, False, 100, 'Apple'),
    142: EventDescriptor('Anims.j2a', 71, 2, False, True, False, False, 100, 'Banana'),
    143: EventDescriptor('Anims.j2a', 71, 16, False, True, False, False, 100, 'Cherry'),
    144: EventDescriptor('Anims.j2a', 71, 71, False, True, False, False, 100, 'Orange'),
    145: EventDescriptor('Anims.j2a', 71, 74, False, True, False, False, 100, 'Pear'),
    146: EventDescriptor('Anims.j2a', 71, 79, False, True, False, False, 100, 'Pretzel'),
    147: EventDescriptor('Anims.j2a', 71, 81, False, True, False, False, 100, 'Strawberry'),
    151: EventDescriptor('Anims.j2a', 71, 0, True, False, False, False, 100, 'Queen Boss'),
    152: EventDescriptor('Anims.j2a', 99, 4, False, False, False, False, 100, 'Floating Sucker'),
    153: EventDescriptor('Anims.j2a', 13, 0, False, False, False, False, 100, 'Bridge'),
    154: EventDescriptor('Anims.j2a', 71, 48, False, True, False, False, 100, 'Lemon'),
    155: EventDescriptor('Anims.j2a', 71, 50, False, True, False, False, 100, 'Lime'),
    156: EventDescriptor('Anims.j2a', 71, 89, False, True, False, False, 100, 'Thing'),
    157: EventDescriptor('Anims.j2a', 71, 92, False, True, False, False, 100, 'Watermelon'),
    158: EventDescriptor('Anims.j2a', 71, 73, False, True, False, False, 100, 'Peach'),
    159: EventDescriptor('Anims.j2a', 71, 38, False, True, False, False, 100, 'Grapes'),
    160: EventDescriptor('Anims.j2a', 71, 49, False, True, False, False, 100, 'Lettuce'),
    161: EventDescriptor('Anims.j2a', 71, 26, False, True, False, False, 100, 'Eggplant'),
    162: EventDescriptor('Anims.j2a', 71, 23, False, True, False, False, 100, 'Cucumb'),
    163: EventDescriptor('Anims.j2a', 71, 20, False, True, False, False, 100, 'Soft Drink'),
    164: EventDescriptor('Anims.j2a', 71, 75, False, True, False, False, 100, 'Soda Pop'),
    165: EventDescriptor('Anims.j2a', 71, 53, False, True, False, False, 100, 'Milk'),
    166: EventDescriptor('Anims.j2a', 71, 76, False, True, False, False, 100, 'Pie'),
    167: EventDescriptor('Anims.j2a', 71, 12, False, True, False, False, 100, 'Cake'),
    168: EventDescriptor('Anims.j2a', 71, 25, False, True, False, False, 100, 'Donut'),
    169: EventDescriptor('Anims.j2a', 71, 24, False, True, False, False, 100, 'Cupcake'),
    170: EventDescriptor('Anims.j2a', 71, 18, False, True, False, False, 100, 'Chips'),
    171: EventDescriptor('Anims.j2a', 71, 13, False, True, False, False, 100, 'Candy'),
    172: EventDescriptor('Anims.j2a', 71, 19, False, True, False, False, 100, 'Chocbar'),
    173: EventDescriptor('Anims.j2a', 71, 43, False, True, False, False, 100, 'Icecream'),
    174: EventDescriptor('Anims.j2a', 71, 11, False, True, False, False, 100, 'Burger'),
    175: EventDescriptor('Anims.j2a', 71, 77, False, True, False, False, 100, 'Pizza'),
    176: EventDescriptor('Anims.j2a', 71, 32, False, True, False, False, 100, 'Fries'),
    177: EventDescriptor('Anims.j2a', 71, 17, False, True, False, False, 100, 'Chicken Leg'),
    178: EventDescriptor('Anims.j2a', 71, 80, False, True, False, False, 100, 'Sandwich'),
    179: EventDescriptor('Anims.j2a', 71, 88, False, True, False, False, 100, 'Taco'),
    180: EventDescriptor('Anims.j2a', 71, 91, False, True, False, False, 100, 'Weenie'),
    181: EventDescriptor('Anims.j2a', 71, 39, False, True, False, False, 100, 'Ham'),
    182: EventDescriptor('Anims.j2a', 71, 15, False, True, False, False, 100, 'Cheese'),
    183: EventDescriptor('Anims.j2a', 60, 2, False, False, False, True, 100, 'Float Lizard'),
    184: EventDescriptor('Anims.j2a', 67, 2, True, False, False, False, 100, 'Stand Monkey'),
    190: EventDescriptor('Anims.j2a', 77, 1, False, False, False, True, 100, 'Raven'),
    191: EventDescriptor('Anims.j2a', 100, 0, True, False, False, False, 100, 'Tube Turtle'),
    192: EventDescriptor('Anims.j2a', 71, 35, False, False, False, True, 100, 'Gem Ring'),
    193: EventDescriptor('Anims.j2a', 84, 0, True, True, True, False, 100, 'Small Tree'),
    195: EventDescriptor('Anims.j2a', 105, 0, False, False, False, True, 100, 'Uterus'),
    196: EventDescriptor('Anims.j2a', 105, 7, True, False, False, False, 100, 'Crab'),
    197: EventDescriptor('Anims.j2a', 112, 0, False, False, False, False, 100, 'Witch'),
    198: EventDescriptor('Anims.j2a', 80, 1, False, False, False, True, 100, 'Rocket Turtle'),
    199: EventDescriptor('Anims.j2a', 14, 0, True, False, False, False, 100, 'Bubba'),
    200: EventDescriptor('Anims.j2a', 27, 8, True, False, False, False, 100, 'Devil devan boss'),
    201: EventDescriptor('Anims.j2a', 26, 1, False, False, False, False, 100, 'Devan (robot boss)'),
    202: EventDescriptor('Anims.j2a', 78, 3, False, False, False, False, 100, 'Robot (robot boss)'),
    203: EventDescriptor('Anims.j2a', 17, 0, True, True, True, False, 100, 'Carrotus pole'),
    204: EventDescriptor('Anims.j2a', 74, 0, True, True, True, False, 100, 'Psych pole'),
    205: EventDescriptor('Anims.j2a', 28, 0, True, True, True, False, 100, 'Diamondus pole'),
    209: EventDescriptor('Anims.j2a', 48, 0, False, False, False, False, 100, 'Fruit Platform'),
    210: EventDescriptor('Anims.j2a', 10, 0, False, False, False, False, 100, 'Boll Platform'),
    211: EventDescriptor('Anims.j2a', 51, 0, False, False, False, False, 100, 'Grass Platform'),
    212: EventDescriptor('Anims.j2a', 73, 0, False, False, False, False, 100, 'Pink Platform'),
    213: EventDescriptor('Anims.j2a', 87, 0, False, False, False, False, 100, 'Sonic Platform'),
    214: EventDescriptor('Anims.j2a', 95, 0, False, False, False, False, 100, 'Spike Platform'),
    215: EventDescriptor('Anims.j2a', 93, 0, False, False, False, False, 100, 'Spike Boll'),
    217: EventDescriptor('Anims.j2a', 38, 0, True, False, False, False, 100, 'Eva'),
    220: EventDescriptor('Anims.j2a', 71, 66, True, False, False, False, 100, 'Gun8 Powerup'),
    221: EventDescriptor('Anims.j2a', 71, 67, True, False, False, False, 100, 'Gun9 Powerup'),
    223: EventDescriptor('Anims.j2a', 93, 0, False, False, False, False, 100, '3D Spike Boll'),
    226: EventDescriptor('Anims.j2a', 60, 3, False, False, False, True, 100, 'Copter'),
    227: EventDescriptor('Plus.j2a', 2, 2, True, False, False, False, 100, 'Laser Shield'),
    228: EventDescriptor('Anims.j2a', 71, 87, False, True, False, False, 100, 'Stopwatch'),
    229: EventDescriptor('Anims.j2a', 58, 0, True, True, True, False, 100, 'Jungle Pole'),
    231: EventDescriptor('Anims.j2a', 5, 0, True, False, False, False, 100, 'Big Rock'),
    232: EventDescriptor('Anims.j2a', 4, 0, True, False, False, False, 100, 'Big Box'),
    235: EventDescriptor('Anims.j2a', 86, 2, False, False, False, False, 100, 'Bolly Boss'),
    236: EventDescriptor('Anims.j2a', 16, 0, False, False, False, True, 100, 'Butterfly'),
    237: EventDescriptor('Anims.j2a', 3, 0, False, False, False, True, 100, 'BeeBoy'),
    244: EventDescriptor('Anims.j2a', 44, 1, True, False, False, False, 100, 'CTF Base + Flag'),
    247: EventDescriptor('Anims.j2a', 113, 4, True, False, False, False, 100, 'Xmas Bilsy Boss'),
    248: EventDescriptor('Anims.j2a', 115, 7, True, False, False, False, 100, 'Xmas Norm Turtle'),
    249: EventDescriptor('Anims.j2a', 114, 4, True, False, False, False, 100, 'Xmas Lizard'),
    250: EventDescriptor('Anims.j2a', 114, 2, False, False, False, True, 100, 'Xmas Float Lizard'),
    251: EventDescriptor('Anims.j2a', 113, 0, True, False, False, False, 100, 'Addon DOG'),  # actually xmas bilsy
    252: EventDescriptor('Anims.j2a', 116, 1, True, False, False, False, 100, 'Addon Sparks'),  # actually a cat
    253: EventDescriptor('Anims.j2a', 117, 0, False, False, False, True, 100, 'Blue Ghost'),  # actually a ghost
    # the next few are 'meta' events without their own event but may replace
    # other events with a sprite from Plus.j2a, event ID >= 300
    300: EventDescriptor('Anims.j2a', 71, 58, True, False, False, False, 100, 'TNT Ammo+15'),
    301: EventDescriptor('Plus.j2a', 2, 0, True, False, False, False, 100, 'Gun8 Ammo+15'),
    302: EventDescriptor('Plus.j2a', 2, 1, True, False, False, False, 100, 'Gun9 Ammo+15'),
    # custom weapons, event ID >= 500
    # 3 per weapon; +3 pickup, +15 crate, powerup monitor
    500: EventDescriptor('SEroller.j2a', 0, 0, False, True, False, False, 100, 'Roller Ammo+3'),
    501: EventDescriptor('SEroller.j2a', 0, 2, True, False, False, False, 100, 'Roller Ammo+15'),
    502: EventDescriptor('SEroller.j2a', 0, 3, True, False, False, False, 100, 'Roller Powerup'),
    510: EventDescriptor('SEfirework.j2a', 0, 0, False, True, False, False, 100, 'Firework Ammo+3'),
    511: EventDescriptor('SEfirework.j2a', 0, 2, True, False, False, False, 100, 'Firework Ammo+15'),
    512: EventDescriptor('SEfirework.j2a', 0, 3, True, False, False, False, 100, 'Firework Powerup'),
    520: EventDescriptor('SEenergyblast.j2a', 0, 0, False, True, False, False, 100, 'Energy Blast Ammo+3'),
    521: EventDescriptor('SEenergyblast.j2a', 0, 2, True, False, False, False, 100, 'Energy Blast Ammo+15'),
    522: EventDescriptor('SEenergyblast.j2a', 0, 3, True, False, False, False, 100, 'Energy Blast Powerup'),
    530: EventDescriptor('BubbleGun-mlle.j2a', 0, 0, False, True, False, False, 100, 'Bubble Gun Ammo+3'),
    531: EventDescriptor('BubbleGun-mlle.j2a', 0, 1, True, False, False, False, 100, 'Bubble Gun Ammo+15'),
    532: EventDescriptor('BubbleGun-mlle.j2a', 0, 2, True, False, False, False, 100, 'Bubble Gun Powerup'),
    540: EventDescriptor('CosmicDust.j2a', 0, 1, False, True, False, False, 100, 'Cosmic Dust Ammo+3'),
    541: EventDescriptor('CosmicDust.j2a', 0, 3, True, False, False, False, 100, 'Cosmic Dust Ammo+15'),
    542: EventDescriptor('CosmicDust.j2a', 0, 4, True, False, False, False, 100, 'Cosmic Dust Powerup'),
    550: EventDescriptor('dischargeGun.j2a', 0, 3, False, True, False, False, 100, 'Discharge Gun Ammo+3'),
    551: EventDescriptor('dischargeGun.j2a', 0, 3, True, False, False, False, 200, 'Discharge Gun Ammo+15'),
    552: EventDescriptor('dischargeGun.j2a', 0, 4, True, False, False, False, 100, 'Discharge Gun Powerup'),
    560: EventDescriptor('flashbang.j2a', 0, 2, False, True, False, False, 100, 'Flashbang Ammo+3'),
    561: EventDescriptor('flashbang.j2a', 0, 2, True, False, False, False, 200, 'Flashbang Ammo+15'),
    562: EventDescriptor('flashbang.j2a', 0, 3, True, False, False, False, 100, 'Flashbang Powerup'),
    570: EventDescriptor('FusionCannon.j2a', 0, 0, False, True, False, False, 100, 'Fusion Cannon Ammo+3'),
    571: EventDescriptor('FusionCannon.j2a', 0, 3, True, False, False, False, 100, 'Fusion Cannon Ammo+15'),
    572: EventDescriptor('FusionCannon.j2a', 0, 2, True, False, False, False, 100, 'Fusion Cannon Powerup'),
    580: EventDescriptor('LaserBlaster.j2a', 0, 2, False, True, False, False, 100, 'Laser Blaster Ammo+3'),
    581: EventDescriptor('LaserBlaster.j2a', 0, 2, True, False, False, False, 200, 'Laser Blaster Ammo+15'),
    582: EventDescriptor('LaserBlaster.j2a', 0, 4, True, False, False, False, 100, 'Laser Blaster Powerup'),
    590: EventDescriptor('Lightningrod.j2a', 0, 0, False, True, False, False, 100, 'Lightningrod Ammo+3'),
    591: EventDescriptor('Lightningrod.j2a', 0, 5, True, False, False, False, 100, 'Lightningrod Ammo+15'),
    592: EventDescriptor('Lightningrod.j2a', 0, 0, True, False, False, False, 300, 'Lightningrod Powerup'),
    600: EventDescriptor('lockOnMissile.j2a', 0, 3, False, True, False, False, 100, 'Lock-On Missile Ammo+3'),
    601: EventDescriptor('lockOnMissile.j2a', 0, 3, True, False, False, False, 200, 'Lock-On Missile Ammo+15'),
    602: EventDescriptor('lockOnMissile.j2a', 0, 5, True, False, False, False, 100, 'Lock-On Missile Powerup'),
    610: EventDescriptor('Meteor.j2a', 0, 1, False, True, False, False, 100, 'Meteor Ammo+3'),
    611: EventDescriptor('Meteor.j2a', 0, 3, True, False, False, False, 100, 'Meteor Ammo+15'),
    612: EventDescriptor('Meteor.j2a', 0, 4, True, False, False, False, 100, 'Meteor Powerup'),
    620: EventDescriptor('Mortar.j2a', 0, 1, False, True, False, False, 100, 'Mortar Ammo+3'),
    621: EventDescriptor('Mortar.j2a', 0, 4, True, False, False, False, 100, 'Mortar Ammo+15'),
    622: EventDescriptor('Mortar.j2a', 0, 5, True, False, False, False, 100, 'Mortar Powerup'),
    630: EventDescriptor('Nail.j2a', 0, 4, False, True, False, False, 100, 'Nailgun Ammo+3'),
    631: EventDescriptor('Nail.j2a', 0, 2, True, False, False, False, 100, 'Nailgun Ammo+15'),
    632: EventDescriptor('Nail.j2a', 0, 3, True, False, False, False, 100, 'Nailgun Powerup'),
    640: EventDescriptor('petrolBomb.j2a', 0, 3, False, True, False, False, 100, 'Petrol Bomb Ammo+3'),
    641: EventDescriptor('petrolBomb.j2a', 0, 3, True, False, False, False, 200, 'Petrol Bomb Ammo+15'),
    642: EventDescriptor('petrolBomb.j2a', 0, 3, True, False, False, False, 300, 'Petrol Bomb Powerup'),
    650: EventDescriptor('sword.j2a', 0, 3, False, True, False, False, 100, 'Sword Ammo+3'),
    651: EventDescriptor('sword.j2a', 0, 3, True, False, False, False, 200, 'Sword Ammo+15'),
    652: EventDescriptor('sword.j2a', 0, 3, True, False, False, False, 300, 'Sword Powerup'),
    660: EventDescriptor('Syringe.j2a', 0, 0, False, True, False, False, 100, 'Syringe Ammo+3'),
    661: EventDescriptor('Syringe.j2a', 0, 3, True, False, False, False, 100, 'Syringe Ammo+15'),
    662: EventDescriptor('Syringe.j2a', 0, 2, True, False, False, False, 100, 'Syringe Powerup'),
    670: EventDescriptor('TornadoGun.j2a', 0, 3, False, True, False, False, 100, 'Tornado Gun Ammo+3'),
    671: EventDescriptor('TornadoGun.j2a', 0, 5, True, False, False, False, 100, 'Tornado Gun Ammo+15'),
    672: EventDescriptor('TornadoGun.j2a', 0, 4, True, False, False, False, 100, 'Tornado Gun Powerup'),
    680: EventDescriptor('weaponVMega.j2a', 0, 1, False, True, False, False, 100, 'Boomerang Ammo+3'),
    681: EventDescriptor('weaponVMega.j2a', 0, 1, True, False, False, False, 200, 'Boomerang Ammo+15'),
    682: EventDescriptor('weaponVMega.j2a', 0, 1, True, False, False, False, 300, 'Boomerang Powerup'),
    690: EventDescriptor('weaponVMega.j2a', 1, 6, False, True, False, False, 100, 'Burrower Ammo+3'),
    691: EventDescriptor('weaponVMega.j2a', 1, 6, True, False, False, False, 200, 'Burrower Ammo+15'),
    692: EventDescriptor('weaponVMega.j2a', 1, 6, True, False, False, False, 300, 'Burrower Powerup'),
    700: EventDescriptor('weaponVMega.j2a', 2, 3, False, True, False, False, 100, 'Ice Cloud Ammo+3'),
    701: EventDescriptor('weaponVMega.j2a', 2, 3, True, False, False, False, 200, 'Ice Cloud Ammo+15'),
    702: EventDescriptor('weaponVMega.j2a', 2, 3, True, False, False, False, 300, 'Ice Cloud Powerup'),
    710: EventDescriptor('weaponVMega.j2a', 3, 4, False, True, False, False, 100, 'Pathfinder Ammo+3'),
    711: EventDescriptor('weaponVMega.j2a', 3, 4, True, False, False, False, 200, 'Pathfinder Ammo+15'),
    712: EventDescriptor('weaponVMega.j2a', 3, 4, True, False, False, False, 300, 'Pathfinder Powerup'),
    720: EventDescriptor('weaponVMega.j2a', 4, 2, False, True, False, False, 100, 'Backfire Ammo+3'),
    721: EventDescriptor('weaponVMega.j2a', 4, 2, True, False, False, False, 200, 'Backfire Ammo+15'),
    722: EventDescriptor('weaponVMega.j2a', 4, 2, True, False, False, False, 300, 'Backfire Powerup'),
    730: EventDescriptor('weaponVMega.j2a', 5, 2, False, True, False, False, 100, 'Crackerjack Ammo+3'),
    731: EventDescriptor('weaponVMega.j2a', 5, 2, True, False, False, False, 200, 'Crackerjack Ammo+15'),
    732: EventDescriptor('weaponVMega.j2a', 5, 2, True, False, False, False, 300, 'Crackerjack Powerup'),
    740: EventDescriptor('weaponVMega.j2a', 6, 1, False, True, False, False, 100, 'Gravity Well Ammo+3'),
    741: EventDescriptor('weaponVMega.j2a', 6, 1, True, False, False, False, 200, 'Gravity Well Ammo+15'),
    742: EventDescriptor('weaponVMega.j2a', 6, 1, True, False, False, False, 300, 'Gravity Well Powerup'),
    750: EventDescriptor('weaponVMega.j2a', 7, 2, False, True, False, False, 100, 'Voranj Ammo+3'),
    751: EventDescriptor('weaponVMega.j2a', 7, 2, True, False, False, False, 200, 'Voranj Ammo+15'),
    752: EventDescriptor('weaponVMega.j2a', 7, 2, True, False, False, False, 300, 'Voranj Powerup'),
    760: EventDescriptor('SmokeWopens.j2a', 0, 0, False, True, False, False, 100, 'ELEKTREK SHIELD Ammo+3'),
    761: EventDescriptor('SmokeWopens.j2a', 0, 0, True, False, False, False, 200, 'ELEKTREK SHIELD Ammo+15'),
    762: EventDescriptor('SmokeWopens.j2a', 0, 0, True, False, False, False, 300, 'ELEKTREK SHIELD Powerup'),
    770: EventDescriptor('SmokeWopens.j2a', 1, 1, False, True, False, False, 100, 'Zeus Artillery Ammo+3'),
    771: EventDescriptor('SmokeWopens.j2a', 1, 1, True, False, False, False, 200, 'Zeus Artillery Ammo+15'),
    772: EventDescriptor('SmokeWopens.j2a', 1, 1, True, False, False, False, 300, 'Zeus Artillery Powerup'),
    780: EventDescriptor('SmokeWopens.j2a', 2, 0, False, True, False, False, 100, 'Phoenix Gun Ammo+3'),
    781: EventDescriptor('SmokeWopens.j2a', 2, 0, True, False, False, False, 200, 'Phoenix Gun Ammo+15'),
    782: EventDescriptor('SmokeWopens.j2a', 2, 0, True, False, False, False, 300, 'Phoenix Gun Powerup'),
    790: EventDescriptor('autoTurret.j2a', 0, 1, False, True, False, False, 100, 'Auto-turret Ammo+3'),
    791: EventDescriptor('autoTurret.j2a', 0, 1, True, False, False, False, 200, 'Auto-turret Ammo+15'),
    792: EventDescriptor('autoTurret.j2a', 0, 1, True, False, False, False, 300, 'Auto-turret Powerup'),
    800: EventDescriptor('weaponVMega.j2a', 8, 4, False, True, False, False, 100, 'Meteor V Ammo+3'),
    801: EventDescriptor('weaponVMega.j2a', 8, 4, True, False, False, False, 200, 'Meteor V Ammo+15'),
    802: EventDescriptor('weaponVMega.j2a', 8, 4, True, False, False, False, 300, 'Meteor V Powerup'),
    810: EventDescriptor('SEminimirv.j2a', 0, 0, False, True, False, False, 100, 'Mini-MIRV Ammo+3'),
    811: EventDescriptor('SEminimirv.j2a', 0, 2, True, False, False, False, 100, 'Mini-MIRV Ammo+15'),
    812: EventDescriptor('SEminimirv.j2a', 0, 3, True, False, False, False, 100, 'Mini-MIRV Powerup'),
})
