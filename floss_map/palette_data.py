# floss_map/palette_data.py
from __future__ import annotations

"""
Reference palette definitions and the read-only palette store.

Exports:
  PALETTE: list[tuple[str, str, str]]  # [(id, hex, name), ...] DMC stranded cotton
  ReferencePalette(colours, white_id=WHITE_ID)
    .all() / .by_id(id) / .index_of(id) / .white() / .rgb_array()
  construct_palette(rows=PALETTE) -> ReferencePalette
  load_palette_csv(path) -> ReferencePalette
"""

import csv
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .constants import WHITE_ID
from .core_types import ColourId, ReferenceColor, U8Image, hex_to_rgb, squared_distance


PALETTE: List[Tuple[str, str, str]] = [
    ("5200", "#ffffff", "Snow White"),
    ("BLANC", "#fcfbf8", "White"),
    ("ECRU", "#f0eada", "Ecru"),
    ("150", "#ab0249", "Ultra Very Dark Dusty Rose"),
    ("151", "#f0ced4", "Very Light Dusty Rose"),
    ("152", "#e2a099", "Medium Light Shell Pink"),
    ("153", "#e6ccd9", "Very Light Violet"),
    ("154", "#572433", "Very Dark Grape"),
    ("155", "#9891b6", "Medium Dark Blue Violet"),
    ("156", "#a3aed1", "Medium Light Blue Violet"),
    ("157", "#bbc3d9", "Very Light Cornflower Blue"),
    ("158", "#4c526e", "Medium Very Dark Cornflower Blue"),
    ("159", "#c7cad7", "Light Gray Blue"),
    ("160", "#999fb7", "Medium Gray Blue"),
    ("161", "#787899", "Gray Blue"),
    ("162", "#dbecf5", "Ultra Very Light Blue"),
    ("163", "#4d8361", "Medium Celadon Green"),
    ("164", "#c8d8b8", "Light Forest Green"),
    ("165", "#eff4a4", "Very Light Moss Green"),
    ("166", "#c0c840", "Medium Light Moss Green"),
    ("167", "#a77c49", "Very Dark Yellow Beige"),
    ("168", "#d1d1d1", "Very Light Pewter"),
    ("169", "#848484", "Light Pewter"),
    ("208", "#835b8b", "Very Dark Lavender"),
    ("209", "#a37ba7", "Dark Lavender"),
    ("210", "#c39fc3", "Medium Lavender"),
    ("211", "#e3cbe3", "Light Lavender"),
    ("221", "#883e43", "Very Dark Shell Pink"),
    ("223", "#cc847c", "Light Shell Pink"),
    ("224", "#ebb7af", "Very Light Shell Pink"),
    ("225", "#ffdfd5", "Ultra Very Light Shell Pink"),
    ("300", "#6f2f00", "Very Dark Mahogany"),
    ("301", "#b35f2b", "Medium Mahogany"),
    ("304", "#b7001f", "Medium Red"),
    ("307", "#fded54", "Lemon"),
    ("309", "#ba4a63", "Dark Rose"),
    ("310", "#000000", "Black"),
    ("311", "#1c5066", "Medium Navy Blue"),
    ("312", "#35668b", "Very Dark Baby Blue"),
    ("315", "#814952", "Medium Dark Antique Mauve"),
    ("316", "#b7737f", "Medium Antique Mauve"),
    ("317", "#6c6c6c", "Pewter Gray"),
    ("318", "#ababab", "Light Steel Gray"),
    ("319", "#205f2e", "Very Dark Pistachio Green"),
    ("320", "#69885a", "Medium Pistachio Green"),
    ("321", "#c7072e", "Red"),
    ("322", "#5a8fb8", "Dark Baby Blue"),
    ("326", "#b33b4b", "Very Dark Rose"),
    ("327", "#633666", "Dark Violet"),
    ("333", "#5c5478", "Very Dark Blue Violet"),
    ("334", "#739fc1", "Medium Baby Blue"),
    ("335", "#ee546e", "Rose"),
    ("336", "#253b73", "Navy Blue"),
    ("340", "#ada7c7", "Medium Blue Violet"),
    ("341", "#b7bfdd", "Light Blue Violet"),
    ("347", "#bf2d2d", "Very Dark Salmon"),
    ("349", "#d21035", "Dark Coral"),
    ("350", "#e04848", "Medium Coral"),
    ("351", "#e96a67", "Coral"),
    ("352", "#fd9c97", "Light Coral"),
    ("353", "#fed7cc", "Peach"),
    ("355", "#984436", "Dark Terra Cotta"),
    ("356", "#c56a5b", "Medium Terra Cotta"),
    ("367", "#617a52", "Dark Pistachio Green"),
    ("368", "#a6c298", "Light Pistachio Green"),
    ("369", "#d7edcc", "Very Light Pistachio Green"),
    ("370", "#b89d64", "Medium Mustard"),
    ("371", "#bfa671", "Mustard"),
    ("372", "#ccb784", "Light Mustard"),
    ("400", "#8f430f", "Dark Mahogany"),
    ("402", "#f7a777", "Very Light Mahogany"),
    ("407", "#bb8161", "Dark Desert Sand"),
    ("413", "#565656", "Dark Pewter Gray"),
    ("414", "#8c8c8c", "Dark Steel Gray"),
    ("415", "#d3d3d6", "Pearl Gray"),
    ("420", "#a07042", "Dark Hazelnut Brown"),
    ("422", "#c69f7b", "Light Hazelnut Brown"),
    ("433", "#7a451f", "Medium Brown"),
    ("434", "#985e33", "Light Brown"),
    ("435", "#b87748", "Very Light Brown"),
    ("436", "#cb9051", "Tan"),
    ("437", "#e4bb8e", "Light Tan"),
    ("444", "#ffd600", "Dark Lemon"),
    ("445", "#fffb8b", "Light Lemon"),
    ("451", "#917b73", "Dark Shell Gray"),
    ("452", "#c0b3ae", "Medium Shell Gray"),
    ("453", "#d7cecb", "Light Shell Gray"),
    ("469", "#72842c", "Avocado Green"),
    ("470", "#94ab4f", "Light Avocado Green"),
    ("471", "#aebf79", "Very Light Avocado Green"),
    ("472", "#d8e498", "Ultra Light Avocado Green"),
    ("498", "#a7132b", "Dark Red"),
    ("500", "#044d33", "Very Dark Blue Green"),
    ("501", "#396f52", "Dark Blue Green"),
    ("502", "#5b9071", "Blue Green"),
    ("503", "#7bac94", "Medium Blue Green"),
    ("504", "#c4decc", "Very Light Blue Green"),
    ("505", "#338362", "Jade Green"),
    ("517", "#3b768f", "Dark Wedgewood"),
    ("518", "#4f93a7", "Light Wedgewood"),
    ("519", "#7eb1c8", "Sky Blue"),
    ("520", "#666d4f", "Dark Fern Green"),
    ("522", "#969e7e", "Fern Green"),
    ("523", "#abb197", "Light Fern Green"),
    ("524", "#c4cdac", "Very Light Fern Green"),
    ("535", "#636458", "Very Light Ash Gray"),
    ("543", "#f2e3ce", "Ultra Very Light Beige Brown"),
    ("550", "#5c184e", "Very Dark Violet"),
    ("552", "#803a6b", "Medium Violet"),
    ("553", "#a3638b", "Violet"),
    ("554", "#dbb3cb", "Light Violet"),
    ("561", "#2c6a45", "Very Dark Jade"),
    ("562", "#538f69", "Medium Jade"),
    ("563", "#8fc0a0", "Light Jade"),
    ("564", "#a7cdaf", "Very Light Jade"),
    ("581", "#a7ae38", "Moss Green"),
    ("597", "#5ba3b3", "Turquoise"),
    ("598", "#90c3cc", "Light Turquoise"),
    ("600", "#cd2f63", "Very Dark Cranberry"),
    ("601", "#d1286f", "Dark Cranberry"),
    ("602", "#e24874", "Medium Cranberry"),
    ("603", "#ffa4be", "Cranberry"),
    ("604", "#ffb0be", "Light Cranberry"),
    ("605", "#ffc0cd", "Very Light Cranberry"),
    ("606", "#fa3203", "Bright Orange-Red"),
    ("608", "#fd5d35", "Bright Orange"),
    ("610", "#796047", "Dark Drab Brown"),
    ("611", "#967656", "Drab Brown"),
    ("612", "#bc9a78", "Light Drab Brown"),
    ("613", "#dcc4aa", "Very Light Drab Brown"),
    ("632", "#875539", "Ultra Very Dark Desert Sand"),
    ("640", "#857b61", "Very Dark Beige Gray"),
    ("642", "#a49878", "Dark Beige Gray"),
    ("644", "#ddd8cb", "Medium Beige Gray"),
    ("645", "#6e655c", "Very Dark Beaver Gray"),
    ("646", "#878679", "Dark Beaver Gray"),
    ("647", "#b0a697", "Medium Beaver Gray"),
    ("648", "#bcb4ac", "Light Beaver Gray"),
    ("666", "#e31d42", "Bright Red"),
    ("676", "#e5ce97", "Light Old Gold"),
    ("677", "#f5eccb", "Very Light Old Gold"),
    ("680", "#bc8d0e", "Dark Old Gold"),
    ("699", "#056517", "Green"),
    ("700", "#07731b", "Bright Green"),
    ("701", "#3f8f29", "Light Green"),
    ("702", "#479b35", "Kelly Green"),
    ("703", "#7bb535", "Chartreuse"),
    ("704", "#9ecf34", "Bright Chartreuse"),
    ("712", "#fffbef", "Cream"),
    ("718", "#9c2462", "Plum"),
    ("720", "#e55c1f", "Dark Orange Spice"),
    ("721", "#f27842", "Medium Orange Spice"),
    ("722", "#f7976f", "Light Orange Spice"),
    ("725", "#ffc840", "Medium Light Topaz"),
    ("726", "#fdd755", "Light Topaz"),
    ("727", "#fff1af", "Very Light Topaz"),
    ("728", "#e4b468", "Topaz"),
    ("729", "#d0a53e", "Medium Old Gold"),
    ("730", "#827b30", "Very Dark Olive Green"),
    ("731", "#938b23", "Dark Olive Green"),
    ("732", "#948c36", "Olive Green"),
    ("733", "#bcb34c", "Medium Olive Green"),
    ("734", "#c7c077", "Light Olive Green"),
    ("738", "#eccc9e", "Very Light Tan"),
    ("739", "#f8e4c8", "Ultra Very Light Tan"),
    ("740", "#ff8b00", "Tangerine"),
    ("741", "#ffa32b", "Medium Tangerine"),
    ("742", "#ffbf57", "Light Tangerine"),
    ("743", "#fed376", "Medium Yellow"),
    ("744", "#ffe793", "Pale Yellow"),
    ("745", "#ffe9ad", "Light Pale Yellow"),
    ("746", "#fcfcee", "Off White"),
    ("747", "#e5fcfd", "Very Light Sky Blue"),
    ("754", "#f7cbbf", "Light Peach"),
    ("758", "#eeaa9b", "Very Light Terra Cotta"),
    ("760", "#f5adad", "Salmon"),
    ("761", "#ffc9c9", "Light Salmon"),
    ("762", "#ececec", "Very Light Pearl Gray"),
    ("772", "#e4ecd4", "Very Light Yellow Green"),
    ("775", "#d9ebf1", "Very Light Baby Blue"),
    ("776", "#fcb0b9", "Medium Pink"),
    ("777", "#913546", "Very Dark Raspberry"),
    ("778", "#dfb3bb", "Very Light Antique Mauve"),
    ("779", "#624b45", "Dark Cocoa"),
    ("780", "#94630e", "Ultra Very Dark Topaz"),
    ("781", "#a26d20", "Very Dark Topaz"),
    ("782", "#ae7720", "Dark Topaz"),
    ("783", "#ce9124", "Medium Topaz"),
    ("791", "#464563", "Very Dark Cornflower Blue"),
    ("792", "#555b7b", "Dark Cornflower Blue"),
    ("793", "#707da2", "Medium Cornflower Blue"),
    ("794", "#8f9cc1", "Light Cornflower Blue"),
    ("796", "#11416e", "Dark Royal Blue"),
    ("797", "#13477d", "Royal Blue"),
    ("798", "#4667a6", "Dark Delft Blue"),
    ("799", "#7495ca", "Medium Delft Blue"),
    ("800", "#c0cce5", "Pale Delft Blue"),
    ("801", "#653919", "Dark Coffee Brown"),
    ("803", "#2c597c", "Ultra Very Dark Baby Blue"),
    ("806", "#3d95a5", "Dark Peacock Blue"),
    ("807", "#64abba", "Peacock Blue"),
    ("809", "#94a8c6", "Delft Blue"),
    ("813", "#a1c2d7", "Light Blue"),
    ("814", "#7b001b", "Dark Garnet"),
    ("815", "#87071f", "Medium Garnet"),
    ("816", "#970b23", "Garnet"),
    ("817", "#bb051f", "Very Dark Coral Red"),
    ("818", "#ffdfd9", "Baby Pink"),
    ("819", "#ffeeeb", "Light Baby Pink"),
    ("820", "#0e365c", "Very Dark Royal Blue"),
    ("822", "#e7e2d3", "Light Beige Gray"),
    ("823", "#213063", "Dark Navy Blue"),
    ("824", "#396987", "Very Dark Blue"),
    ("825", "#4781a5", "Dark Blue"),
    ("826", "#6b9ebf", "Medium Blue"),
    ("827", "#bddded", "Very Light Blue"),
    ("828", "#c5e8ed", "Ultra Very Light Blue"),
    ("829", "#7e6a10", "Very Dark Golden Olive"),
    ("830", "#8d7814", "Dark Golden Olive"),
    ("831", "#aa8f15", "Medium Golden Olive"),
    ("832", "#bd9b51", "Golden Olive"),
    ("833", "#c8ab6c", "Light Golden Olive"),
    ("834", "#dbbe7f", "Very Light Golden Olive"),
    ("838", "#594949", "Very Dark Beige Brown"),
    ("839", "#675548", "Dark Beige Brown"),
    ("840", "#9a7c5c", "Medium Beige Brown"),
    ("841", "#b69b7e", "Light Beige Brown"),
    ("842", "#d1baa1", "Very Light Beige Brown"),
    ("844", "#484848", "Ultra Dark Beaver Gray"),
    ("869", "#835e39", "Very Dark Hazelnut Brown"),
    ("890", "#174923", "Ultra Dark Pistachio Green"),
    ("891", "#ff3238", "Dark Carnation"),
    ("892", "#ff394f", "Medium Carnation"),
    ("893", "#fc90a2", "Light Carnation"),
    ("894", "#ffb2bb", "Very Light Carnation"),
    ("895", "#1b5300", "Very Dark Hunter Green"),
    ("898", "#492a13", "Very Dark Coffee Brown"),
    ("899", "#f27688", "Medium Rose"),
    ("900", "#d15807", "Dark Burnt Orange"),
    ("902", "#822637", "Very Dark Garnet"),
    ("904", "#557822", "Very Dark Parrot Green"),
    ("905", "#628a28", "Dark Parrot Green"),
    ("906", "#7fa82a", "Medium Parrot Green"),
    ("907", "#c7e666", "Light Parrot Green"),
    ("909", "#156f49", "Very Dark Emerald Green"),
    ("910", "#188453", "Dark Emerald Green"),
    ("911", "#189065", "Medium Emerald Green"),
    ("912", "#1ba366", "Light Emerald Green"),
    ("913", "#6dab77", "Medium Nile Green"),
    ("915", "#820043", "Dark Plum"),
    ("917", "#9b1356", "Medium Plum"),
    ("918", "#82340a", "Dark Red Copper"),
    ("919", "#a64510", "Red Copper"),
    ("920", "#ac5418", "Medium Copper"),
    ("921", "#c66224", "Copper"),
    ("922", "#e27323", "Light Copper"),
    ("924", "#566a6a", "Very Dark Gray Green"),
    ("926", "#98aeae", "Medium Gray Green"),
    ("927", "#bdcbcb", "Light Gray Green"),
    ("928", "#dde3e3", "Very Light Gray Green"),
    ("930", "#455c71", "Dark Antique Blue"),
    ("931", "#6a859e", "Medium Antique Blue"),
    ("932", "#a2b5c6", "Light Antique Blue"),
    ("934", "#313919", "Black Avocado Green"),
    ("935", "#424d21", "Dark Avocado Green"),
    ("936", "#4c5826", "Very Dark Avocado Green"),
    ("937", "#627133", "Medium Avocado Green"),
    ("938", "#361f0e", "Ultra Dark Coffee Brown"),
    ("939", "#1b2853", "Very Dark Navy Blue"),
    ("943", "#3d9384", "Medium Aquamarine"),
    ("945", "#fbd5bb", "Tawny"),
    ("946", "#eb6307", "Medium Burnt Orange"),
    ("947", "#ff7b4d", "Burnt Orange"),
    ("948", "#fee7da", "Very Light Peach"),
    ("950", "#eed3c4", "Light Desert Sand"),
    ("951", "#ffe2cf", "Light Tawny"),
    ("954", "#88ba91", "Nile Green"),
    ("955", "#a2d6ad", "Light Nile Green"),
    ("956", "#ff9191", "Geranium"),
    ("957", "#fdb5b5", "Pale Geranium"),
    ("958", "#3eb6a1", "Dark Seagreen"),
    ("959", "#59c7b4", "Medium Seagreen"),
    ("961", "#cf7373", "Dark Dusty Rose"),
    ("962", "#e68a8a", "Medium Dusty Rose"),
    ("963", "#ffd7d7", "Ultra Very Light Dusty Rose"),
    ("964", "#a9e2d8", "Light Seagreen"),
    ("966", "#b9d7c0", "Medium Baby Green"),
    ("970", "#f78b13", "Light Pumpkin"),
    ("971", "#f67f00", "Pumpkin"),
    ("972", "#ffb515", "Deep Canary"),
    ("973", "#ffe300", "Bright Canary"),
    ("975", "#753f10", "Dark Golden Brown"),
    ("976", "#c28142", "Medium Golden Brown"),
    ("977", "#dc9c56", "Light Golden Brown"),
    ("986", "#405230", "Very Dark Forest Green"),
    ("987", "#587141", "Dark Forest Green"),
    ("988", "#738b5b", "Medium Forest Green"),
    ("989", "#8da675", "Forest Green"),
    ("991", "#477b6e", "Dark Aquamarine"),
    ("992", "#6fae9f", "Light Aquamarine"),
    ("993", "#90c0b4", "Very Light Aquamarine"),
    ("995", "#2696b6", "Dark Electric Blue"),
    ("996", "#30c2ec", "Medium Electric Blue"),
    ("3011", "#898a58", "Dark Khaki Green"),
    ("3012", "#a6a75d", "Medium Khaki Green"),
    ("3013", "#b9b982", "Light Khaki Green"),
    ("3021", "#4f4b41", "Very Dark Brown Gray"),
    ("3022", "#8e9078", "Medium Brown Gray"),
    ("3023", "#b1aa97", "Light Brown Gray"),
    ("3024", "#ebeae7", "Very Light Brown Gray"),
    ("3031", "#4b3c2a", "Very Dark Mocha Brown"),
    ("3032", "#b39f8b", "Medium Mocha Brown"),
    ("3033", "#e3d8cc", "Very Light Mocha Brown"),
    ("3041", "#956f7c", "Medium Antique Violet"),
    ("3042", "#b7949d", "Light Antique Violet"),
    ("3045", "#bc966a", "Dark Yellow Beige"),
    ("3046", "#d8bc9a", "Medium Yellow Beige"),
    ("3047", "#e7d6c1", "Light Yellow Beige"),
    ("3051", "#5f6648", "Dark Green Gray"),
    ("3052", "#889268", "Medium Green Gray"),
    ("3053", "#9ca482", "Green Gray"),
    ("3064", "#c48e70", "Desert Sand"),
    ("3072", "#e6e8e8", "Very Light Beaver Gray"),
    ("3078", "#fdf9cd", "Very Light Golden Yellow"),
    ("3325", "#b8d2e6", "Light Baby Blue"),
    ("3326", "#fbadb4", "Light Rose"),
    ("3328", "#e36d6d", "Dark Salmon"),
    ("3340", "#ff836f", "Medium Apricot"),
    ("3341", "#fcab98", "Apricot"),
    ("3345", "#1b5915", "Dark Hunter Green"),
    ("3346", "#406a3a", "Hunter Green"),
    ("3347", "#71935c", "Medium Yellow Green"),
    ("3348", "#ccd9b1", "Light Yellow Green"),
    ("3350", "#bc4365", "Ultra Dark Dusty Rose"),
    ("3354", "#e4a6ac", "Light Dusty Rose"),
    ("3362", "#5e6b4c", "Dark Pine Green"),
    ("3363", "#728256", "Medium Pine Green"),
    ("3364", "#83975f", "Pine Green"),
    ("3371", "#1e1108", "Black Brown"),
    ("3607", "#c55585", "Light Plum"),
    ("3608", "#ea9cc4", "Very Light Plum"),
    ("3609", "#f4aed5", "Ultra Light Plum"),
    ("3685", "#881531", "Very Dark Mauve"),
    ("3687", "#c96b70", "Mauve"),
    ("3688", "#e7a9ac", "Medium Mauve"),
    ("3689", "#fbbfc2", "Light Mauve"),
    ("3705", "#ff7992", "Dark Melon"),
    ("3706", "#ffadbc", "Medium Melon"),
    ("3708", "#ffcbd5", "Light Melon"),
    ("3712", "#f18787", "Medium Salmon"),
    ("3713", "#ffe2e2", "Very Light Salmon"),
    ("3716", "#ffbdbd", "Very Light Dusty Rose"),
    ("3721", "#a14b51", "Dark Shell Pink"),
    ("3722", "#bc6c64", "Medium Shell Pink"),
    ("3726", "#9b5b66", "Dark Antique Mauve"),
    ("3727", "#dba9b2", "Light Antique Mauve"),
    ("3731", "#da6783", "Very Dark Dusty Rose"),
    ("3733", "#e8879b", "Dusty Rose"),
    ("3743", "#d7cbd3", "Very Light Antique Violet"),
    ("3746", "#776b98", "Dark Blue Violet"),
    ("3747", "#d3d7ed", "Very Light Blue Violet"),
    ("3750", "#384c5e", "Very Dark Antique Blue"),
    ("3752", "#c7d1db", "Very Light Antique Blue"),
    ("3753", "#dbe2e9", "Ultra Very Light Antique Blue"),
    ("3755", "#93b4ce", "Baby Blue"),
    ("3756", "#eefcfc", "Ultra Very Light Baby Blue"),
    ("3760", "#3e85a2", "Medium Wedgewood"),
    ("3761", "#acd8e2", "Light Sky Blue"),
    ("3765", "#347f8c", "Very Dark Peacock Blue"),
    ("3766", "#99cfd9", "Light Peacock Blue"),
    ("3768", "#657f7f", "Dark Gray Green"),
    ("3770", "#ffeee3", "Very Light Tawny"),
    ("3772", "#a06c50", "Very Dark Desert Sand"),
    ("3773", "#b67566", "Medium Desert Sand"),
    ("3774", "#f3e1d7", "Very Light Desert Sand"),
    ("3776", "#cf7939", "Light Mahogany"),
    ("3777", "#863022", "Very Dark Terra Cotta"),
    ("3778", "#d98978", "Light Terra Cotta"),
    ("3779", "#f8caba", "Ultra Very Light Terra Cotta"),
    ("3781", "#6b5743", "Dark Mocha Brown"),
    ("3782", "#d2bca6", "Light Mocha Brown"),
    ("3787", "#625d50", "Dark Brown Gray"),
    ("3790", "#7f6a55", "Ultra Dark Beige Gray"),
    ("3799", "#424242", "Very Dark Pewter Gray"),
    ("3801", "#e74967", "Very Dark Melon"),
    ("3802", "#714149", "Very Dark Antique Mauve"),
    ("3803", "#9e3657", "Dark Mauve"),
    ("3804", "#e02876", "Dark Cyclamen Pink"),
    ("3805", "#f3478b", "Cyclamen Pink"),
    ("3806", "#ff8cae", "Light Cyclamen Pink"),
    ("3807", "#60678c", "Cornflower Blue"),
    ("3808", "#366970", "Ultra Very Dark Turquoise"),
    ("3809", "#3f7c85", "Very Dark Turquoise"),
    ("3810", "#488e9a", "Dark Turquoise"),
    ("3811", "#bce3e6", "Very Light Turquoise"),
    ("3812", "#2f8c84", "Very Dark Seagreen"),
    ("3813", "#b2d4bd", "Light Blue Green"),
    ("3814", "#508b7d", "Aquamarine"),
    ("3815", "#477759", "Dark Celadon Green"),
    ("3816", "#65a57d", "Celadon Green"),
    ("3817", "#99c3aa", "Light Celadon Green"),
    ("3818", "#115a3b", "Ultra Very Dark Emerald Green"),
    ("3819", "#e0e868", "Light Moss Green"),
    ("3820", "#dfb65f", "Dark Straw"),
    ("3821", "#f3ce75", "Straw"),
    ("3822", "#f6dc98", "Light Straw"),
    ("3823", "#fffde3", "Ultra Pale Yellow"),
    ("3824", "#fecdc2", "Light Apricot"),
    ("3825", "#fdbd96", "Pale Pumpkin"),
    ("3826", "#ad7239", "Golden Brown"),
    ("3827", "#f7bb77", "Pale Golden Brown"),
    ("3828", "#b78b61", "Hazelnut Brown"),
    ("3829", "#a9820e", "Very Dark Old Gold"),
    ("3830", "#b95544", "Terra Cotta"),
    ("3831", "#b32f48", "Dark Raspberry"),
    ("3832", "#db556e", "Medium Raspberry"),
    ("3833", "#ea8699", "Light Raspberry"),
    ("3834", "#72375d", "Dark Grape"),
    ("3835", "#946083", "Medium Grape"),
    ("3836", "#ba91aa", "Light Grape"),
    ("3837", "#6c3a6e", "Ultra Dark Lavender"),
    ("3838", "#5c7294", "Dark Lavender Blue"),
    ("3839", "#7b8eab", "Medium Lavender Blue"),
    ("3840", "#b0c0da", "Light Lavender Blue"),
    ("3841", "#cddfed", "Pale Baby Blue"),
    ("3842", "#32667c", "Dark Wedgewood"),
    ("3843", "#14aad0", "Electric Blue"),
    ("3844", "#12aeba", "Dark Bright Turquoise"),
    ("3845", "#04c4ca", "Medium Bright Turquoise"),
    ("3846", "#06e3e6", "Light Bright Turquoise"),
    ("3847", "#347d75", "Dark Teal Green"),
    ("3848", "#559392", "Medium Teal Green"),
    ("3849", "#52b3a4", "Light Teal Green"),
    ("3850", "#378477", "Dark Bright Green"),
    ("3851", "#49b3a1", "Light Bright Green"),
    ("3852", "#cd9d37", "Very Dark Straw"),
    ("3853", "#f29746", "Dark Autumn Gold"),
    ("3854", "#f2af68", "Medium Autumn Gold"),
    ("3855", "#fad396", "Light Autumn Gold"),
    ("3856", "#ffd3b5", "Ultra Very Light Mahogany"),
    ("3857", "#68252a", "Dark Rosewood"),
    ("3858", "#964a3f", "Medium Rosewood"),
    ("3859", "#ba8b7c", "Light Rosewood"),
    ("3860", "#7d5d57", "Cocoa"),
    ("3861", "#a68881", "Light Cocoa"),
    ("3862", "#8a6e4e", "Dark Mocha Beige"),
    ("3863", "#a48363", "Medium Mocha Beige"),
    ("3864", "#cbb69c", "Light Mocha Beige"),
    ("3865", "#f9f7f1", "Winter White"),
    ("3866", "#faf6f0", "Ultra Very Light Mocha Brown"),
]


class ReferencePalette:
    """
    Ordered, immutable collection of reference colours.

    Order is insertion order and only matters for tie-breaking. Ids are
    expected to be unique; if the source data repeats one, lookups return
    the first entry in store order.
    """

    def __init__(self, colours: Sequence[ReferenceColor], white_id: str = WHITE_ID):
        self._colours: Tuple[ReferenceColor, ...] = tuple(colours)
        self._index: Dict[ColourId, int] = {}
        for i, colour in enumerate(self._colours):
            self._index.setdefault(colour.id, i)
        self._rgb: U8Image = np.array(
            [c.rgb for c in self._colours], dtype=np.uint8
        ).reshape(-1, 3)
        self._rgb.setflags(write=False)
        self._white_index = self._resolve_white(white_id)

    def _resolve_white(self, white_id: str) -> int:
        if white_id in self._index:
            return self._index[white_id]
        best, best_d = 0, float("inf")
        for i, colour in enumerate(self._colours):
            d = squared_distance(colour.rgb, (255, 255, 255))
            if d < best_d:
                best, best_d = i, d
        return best

    def __len__(self) -> int:
        return len(self._colours)

    def __iter__(self) -> Iterator[ReferenceColor]:
        return iter(self._colours)

    def __getitem__(self, index: int) -> ReferenceColor:
        return self._colours[index]

    def __contains__(self, colour_id: object) -> bool:
        return colour_id in self._index

    def all(self) -> Tuple[ReferenceColor, ...]:
        """All entries in store order."""
        return self._colours

    def by_id(self, colour_id: ColourId) -> Optional[ReferenceColor]:
        """First entry with this id, or None."""
        i = self._index.get(colour_id)
        return None if i is None else self._colours[i]

    def index_of(self, colour_id: ColourId) -> Optional[int]:
        return self._index.get(colour_id)

    @property
    def white_index(self) -> int:
        return self._white_index

    def white(self) -> ReferenceColor:
        """Fail-closed default used when a query colour is unusable."""
        if not self._colours:
            raise LookupError("empty palette has no white entry")
        return self._colours[self._white_index]

    def rgb_array(self) -> U8Image:
        """Read-only uint8 [P,3] view in store order."""
        return self._rgb


def construct_palette(
    rows: Sequence[Tuple[str, str, str]] = PALETTE, white_id: str = WHITE_ID
) -> ReferencePalette:
    """Build a store from (id, hex, name) rows."""
    colours: List[ReferenceColor] = []
    for colour_id, hx, name in rows:
        r, g, b = hex_to_rgb(hx)
        colours.append(ReferenceColor(str(colour_id), r, g, b, name))
    return ReferencePalette(colours, white_id=white_id)


def load_palette_csv(path: Path, white_id: str = WHITE_ID) -> ReferencePalette:
    """
    Load an externally maintained palette.

    Accepted headers: id,r,g,b,name  or  id,hex,name
    Row order is kept.
    """
    colours: List[ReferenceColor] = []
    with open(path, newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        fields = {f.strip().lower() for f in (reader.fieldnames or [])}
        has_rgb = {"r", "g", "b"} <= fields
        if "id" not in fields or not (has_rgb or "hex" in fields):
            raise ValueError(f"{path}: expected columns id,r,g,b,name or id,hex,name")
        for row in reader:
            row = {k.strip().lower(): (v or "").strip() for k, v in row.items() if k}
            if has_rgb:
                rgb = (int(row["r"]), int(row["g"]), int(row["b"]))
                if any(not 0 <= c <= 255 for c in rgb):
                    raise ValueError(f"{path}: channel out of range in row {row['id']!r}")
            else:
                rgb = hex_to_rgb(row["hex"])
            colours.append(ReferenceColor(row["id"], *rgb, row.get("name", "")))
    return ReferencePalette(colours, white_id=white_id)


__all__ = ["PALETTE", "ReferencePalette", "construct_palette", "load_palette_csv"]
