"""Country name to short code lookup used when formatting location captions."""

from __future__ import annotations

COUNTRY_CODES: dict[str, str] = {
    # Europe
    "Romania": "Ro",
    "France": "Fr",
    "United Kingdom": "UK",
    "Italy": "It",
    "Germany": "DE",
    "Spain": "Es",
    "Portugal": "PT",
    "Netherlands": "NL",
    "Belgium": "BE",
    "Switzerland": "CH",
    "Austria": "AT",
    "Poland": "PL",
    "Czech Republic": "CZ",
    "Slovakia": "SK",
    "Hungary": "HU",
    "Croatia": "HR",
    "Slovenia": "SI",
    "Serbia": "RS",
    "Bulgaria": "BG",
    "Greece": "GR",
    "Cyprus": "CY",
    "Malta": "MT",
    "Ireland": "IE",
    "Denmark": "DK",
    "Sweden": "SE",
    "Norway": "NO",
    "Finland": "FI",
    "Iceland": "IS",
    "Estonia": "EE",
    "Latvia": "LV",
    "Lithuania": "LT",
    "Luxembourg": "LU",
    "Monaco": "MC",
    "Andorra": "AD",
    "Liechtenstein": "LI",
    "San Marino": "SM",
    "Vatican City": "VA",
    "Czechia": "CZ",
    "Faroe Islands": "FO",
    # Americas
    "United States": "US",
    "Canada": "CA",
    "Mexico": "MX",
    "Brazil": "BR",
    "Argentina": "AR",
    "Chile": "CL",
    "Colombia": "CO",
    "Peru": "PE",
    "Venezuela": "VE",
    "Ecuador": "EC",
    "Bolivia": "BO",
    "Paraguay": "PY",
    "Uruguay": "UY",
    "Guyana": "GY",
    "Suriname": "SR",
    "Cuba": "CU",
    "Jamaica": "JM",
    "Haiti": "HT",
    "Dominican Republic": "DO",
    "Puerto Rico": "PR",
    "Bahamas": "BS",
    "Barbados": "BB",
    "Trinidad and Tobago": "TT",
    "Belize": "BZ",
    "Guatemala": "GT",
    "Honduras": "HN",
    "El Salvador": "SV",
    "Nicaragua": "NI",
    "Costa Rica": "CR",
    "Panama": "PA",
    "Greenland": "GL",
    # Asia and the Middle East
    "Japan": "JP",
    "China": "CN",
    "South Korea": "KR",
    "North Korea": "KP",
    "India": "IN",
    "Pakistan": "PK",
    "Bangladesh": "BD",
    "Sri Lanka": "LK",
    "Nepal": "NP",
    "Bhutan": "BT",
    "Maldives": "MV",
    "Afghanistan": "AF",
    "Iran": "IR",
    "Iraq": "IQ",
    "Turkey": "TR",
    "Syria": "SY",
    "Lebanon": "LB",
    "Jordan": "JO",
    "Israel": "IL",
    "Palestine": "PS",
    "Saudi Arabia": "SA",
    "Yemen": "YE",
    "Oman": "OM",
    "United Arab Emirates": "AE",
    "Qatar": "QA",
    "Bahrain": "BH",
    "Kuwait": "KW",
    "Taiwan": "TW",
    "Hong Kong": "HK",
    "Macau": "MO",
    "Türkiye": "TR",
    # Africa
    "Egypt": "EG",
    "Libya": "LY",
    "Tunisia": "TN",
    "Algeria": "DZ",
    "Morocco": "MA",
    "Sudan": "SD",
    "South Sudan": "SS",
    "Ethiopia": "ET",
    "Eritrea": "ER",
    "Djibouti": "DJ",
    "Somalia": "SO",
    "Kenya": "KE",
    "Uganda": "UG",
    "Tanzania": "TZ",
    "Rwanda": "RW",
    "Burundi": "BI",
    "Democratic Republic of the Congo": "CD",
    "Republic of the Congo": "CG",
    "Central African Republic": "CF",
    "Chad": "TD",
    "Cameroon": "CM",
    "Equatorial Guinea": "GQ",
    "Gabon": "GA",
    "São Tomé and Príncipe": "ST",
    "Nigeria": "NG",
    "Niger": "NE",
    "Burkina Faso": "BF",
    "Mali": "ML",
    "Senegal": "SN",
    "Mauritania": "MR",
    "Guinea": "GN",
    "Guinea-Bissau": "GW",
    "Sierra Leone": "SL",
    "Liberia": "LR",
    "Ivory Coast": "CI",
    "Ghana": "GH",
    "Togo": "TG",
    "Benin": "BJ",
    "South Africa": "ZA",
    "Namibia": "NA",
    "Botswana": "BW",
    "Zimbabwe": "ZW",
    "Zambia": "ZM",
    "Malawi": "MW",
    "Mozambique": "MZ",
    "Swaziland": "SZ",
    "Lesotho": "LS",
    "Madagascar": "MG",
    "Mauritius": "MU",
    "Seychelles": "SC",
    "Comoros": "KM",
    "Cape Verde": "CV",
    "Angola": "AO",
    "Gambia": "GM",
    "Eswatini": "SZ",
    "Côte d'Ivoire": "CI",
    # Oceania
    "Australia": "AU",
    "New Zealand": "NZ",
    "Papua New Guinea": "PG",
    "Fiji": "FJ",
    "Solomon Islands": "SB",
    "Vanuatu": "VU",
    "New Caledonia": "NC",
    "French Polynesia": "PF",
    "Samoa": "WS",
    "Tonga": "TO",
    "Kiribati": "KI",
    "Tuvalu": "TV",
    "Nauru": "NR",
    "Palau": "PW",
    "Marshall Islands": "MH",
    "Micronesia": "FM",
    # Former Soviet states and the Balkans
    "Russia": "RU",
    "Kazakhstan": "KZ",
    "Uzbekistan": "UZ",
    "Turkmenistan": "TM",
    "Kyrgyzstan": "KG",
    "Tajikistan": "TJ",
    "Mongolia": "MN",
    "Belarus": "BY",
    "Ukraine": "UA",
    "Moldova": "MD",
    "Georgia": "GE",
    "Armenia": "AM",
    "Azerbaijan": "AZ",
    "Albania": "AL",
    "Montenegro": "ME",
    "Bosnia and Herzegovina": "BA",
    "North Macedonia": "MK",
    "Kosovo": "XK",
    # Southeast Asia
    "Thailand": "TH",
    "Vietnam": "VN",
    "Laos": "LA",
    "Cambodia": "KH",
    "Myanmar": "MM",
    "Malaysia": "MY",
    "Singapore": "SG",
    "Indonesia": "ID",
    "Brunei": "BN",
    "Philippines": "PH",
    "East Timor": "TL",
}


def resolve_country_code(country_name: str) -> str:
    """Return the short code for `country_name`, or the name itself if unknown."""
    return COUNTRY_CODES.get(country_name, country_name)
