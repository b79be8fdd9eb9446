"""Bundled JavaScript samples for trying the tool out."""

from __future__ import annotations

from typing import Dict

DEFAULT_SAMPLE = """\
// Nested application object
var MyApp = {
    user: {
        profile: {
            getName: function() {
                return this.name;
            },
            setName: function(name) {
                this.name = name;
            }
        },
        preferences: {
            theme: 'dark',
            language: 'en-US'
        }
    },
    utils: {
        crypto: {
            encrypt: function(data) {
                return btoa(JSON.stringify(data));
            },
            decrypt: function(encrypted) {
                return JSON.parse(atob(encrypted));
            }
        },
        validate: {
            email: function(email) {
                return /^[^\\s@]+@[^\\s@]+\\.[^\\s@]+$/.test(email);
            }
        }
    },
    api: {
        request: function(url, options) {
            return fetch(url, options);
        }
    }
};

// Call sites
function processUserData(userData) {
    const name = MyApp.user.profile.getName();
    const encrypted = MyApp.utils.crypto.encrypt(userData);
    return {
        name: name,
        data: encrypted
    };
}

// Dynamic property access
window['MyApp']['user']['profile']['getName']();
"""

MINIMAL_SAMPLE = """\
function hello() {
    return 'Hello World';
}

hello();
"""

COMPLEX_SAMPLE = """\
const obj = {
    nested: {
        deep: {
            func: () => console.log('deep')
        }
    }
};

obj.nested.deep.func();
obj['nested']['deep']['func']();
"""

SAMPLES: Dict[str, str] = {
    "default": DEFAULT_SAMPLE,
    "minimal": MINIMAL_SAMPLE,
    "complex": COMPLEX_SAMPLE,
}
